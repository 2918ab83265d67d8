from enum import Enum


class OrderStatus(Enum):
    DRAFT = "DRAFT"                                       # Built by OrderBuilder, not yet persisted
    PENDING_LOCAL_PERSIST = "PENDING_LOCAL_PERSIST"       # Local write in flight
    PENDING_REMOTE_SUBMIT = "PENDING_REMOTE_SUBMIT"       # Durable locally, remote create not confirmed
    SUBMITTED = "SUBMITTED"                               # Remote create succeeded, remote_id reconciled
    CONFIRMED = "CONFIRMED"                               # Paid or accepted by the shop (final)
    CANCELLED = "CANCELLED"                               # Cancelled by user, admin or payment provider (final)
    FAILED = "FAILED"                                     # Payment failed, may still be confirmed or cancelled
