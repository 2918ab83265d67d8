"""
Local order lifecycle.

    DRAFT -> PENDING_LOCAL_PERSIST -> PENDING_REMOTE_SUBMIT -> SUBMITTED -> CONFIRMED | CANCELLED | FAILED

Every status change made by the submission pipeline is checked here first and
leaves an ORDER_STATUS_TRANSITION line in the log.
"""

import logging
from typing import NamedTuple

from enums.order_status import OrderStatus

logger = logging.getLogger(__name__)


class OrderStatusTransition(NamedTuple):
    from_status: OrderStatus
    to_status: OrderStatus
    description: str = ""

    def __repr__(self):
        return f"{self.from_status.value} -> {self.to_status.value}"


class OrderStateMachine:
    """
    Allowed moves between order statuses.

    CONFIRMED and CANCELLED are final. FAILED means the payment failed and is
    not final: a later payment can still confirm the order, or the user can
    cancel it. An order that never reached the server can be abandoned
    (PENDING_REMOTE_SUBMIT -> CANCELLED).
    """

    VALID_TRANSITIONS: tuple[OrderStatusTransition, ...] = (
        OrderStatusTransition(OrderStatus.DRAFT, OrderStatus.PENDING_LOCAL_PERSIST,
                              "Draft handed to the submission pipeline"),
        OrderStatusTransition(OrderStatus.PENDING_LOCAL_PERSIST, OrderStatus.PENDING_REMOTE_SUBMIT,
                              "Order saved locally"),
        OrderStatusTransition(OrderStatus.PENDING_REMOTE_SUBMIT, OrderStatus.SUBMITTED,
                              "Remote order created"),
        OrderStatusTransition(OrderStatus.PENDING_REMOTE_SUBMIT, OrderStatus.CANCELLED,
                              "Unsubmitted order abandoned"),
        OrderStatusTransition(OrderStatus.SUBMITTED, OrderStatus.CONFIRMED,
                              "Payment succeeded or order accepted by the shop"),
        OrderStatusTransition(OrderStatus.SUBMITTED, OrderStatus.CANCELLED,
                              "Order cancelled"),
        OrderStatusTransition(OrderStatus.SUBMITTED, OrderStatus.FAILED,
                              "Payment failed"),
        OrderStatusTransition(OrderStatus.FAILED, OrderStatus.CONFIRMED,
                              "Payment succeeded on a later attempt"),
        OrderStatusTransition(OrderStatus.FAILED, OrderStatus.CANCELLED,
                              "Order cancelled after failed payment"),
    )

    FINAL_STATUSES = frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED})

    _descriptions: dict[tuple[OrderStatus, OrderStatus], str] = {
        (t.from_status, t.to_status): t.description for t in VALID_TRANSITIONS
    }

    @classmethod
    def is_valid_transition(cls, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        """Staying in the same status always passes."""
        return from_status == to_status or (from_status, to_status) in cls._descriptions

    @classmethod
    def get_valid_transitions(cls, from_status: OrderStatus) -> list[OrderStatus]:
        return [t.to_status for t in cls.VALID_TRANSITIONS if t.from_status == from_status]

    @classmethod
    def get_transition_description(cls, from_status: OrderStatus, to_status: OrderStatus) -> str:
        return cls._descriptions.get(
            (from_status, to_status),
            f"Transition from {from_status.value} to {to_status.value}"
        )

    @classmethod
    def is_final_status(cls, status: OrderStatus) -> bool:
        return status in cls.FINAL_STATUSES

    @classmethod
    def validate_and_log_transition(cls, order_id: int | str, from_status: OrderStatus, to_status: OrderStatus,
                                    user_id: int | None = None) -> bool:
        """
        Check a transition and write the audit line for it.

        Args:
            order_id: Local order id, or the draft id while the order is not saved yet
            user_id: Session user behind the change, None for system-driven changes

        Returns:
            False (and an error line) when the transition is not allowed
        """
        if not cls.is_valid_transition(from_status, to_status):
            logger.error(f"Invalid status transition for order {order_id}: {from_status.value} -> {to_status.value}")
            return False

        performer = f"user {user_id}" if user_id else "system"
        logger.info(
            f"ORDER_STATUS_TRANSITION: Order {order_id} {from_status.value} -> {to_status.value} "
            f"by {performer}: {cls.get_transition_description(from_status, to_status)}"
        )
        return True
