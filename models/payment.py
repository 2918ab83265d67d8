from pydantic import BaseModel, ConfigDict

from enums.payment_method import PaymentMethod
from enums.payment_outcome import PaymentOutcomeKind


class PaymentOutcome(BaseModel):
    """
    Terminal result of an externally redirected payment.

    Derived from a return URL and consumed once to drive an order status
    transition. Never persisted.
    """
    model_config = ConfigDict(frozen=True)

    kind: PaymentOutcomeKind
    order_id: int | None = None
    message: str | None = None

    @classmethod
    def success(cls, order_id: int) -> "PaymentOutcome":
        return cls(kind=PaymentOutcomeKind.SUCCESS, order_id=order_id)

    @classmethod
    def failed(cls) -> "PaymentOutcome":
        return cls(kind=PaymentOutcomeKind.FAILED)

    @classmethod
    def cancelled(cls) -> "PaymentOutcome":
        return cls(kind=PaymentOutcomeKind.CANCELLED)

    @classmethod
    def error(cls, message: str) -> "PaymentOutcome":
        return cls(kind=PaymentOutcomeKind.ERROR, message=message)


class CreatePaymentRequestDTO(BaseModel):
    orderId: int
    amount: float
    currency: str = "RUB"
    method: PaymentMethod
    description: str = ""
    returnUrl: str | None = None


class PaymentRedirectDTO(BaseModel):
    """Payment created by the provider, confirmationUrl is opened in the browser/webview."""
    id: str
    orderId: int
    status: str = "PENDING"
    confirmationUrl: str | None = None
