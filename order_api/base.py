"""Remote order API interface.

The submission pipeline only talks to the backend through this interface, so
the HTTP client and the in-memory fake can be swapped at construction time.
"""

from abc import ABC, abstractmethod

from enums.payment_method import PaymentMethod
from models.order import OrderDraftDTO, RemoteOrderDTO
from models.payment import PaymentRedirectDTO


class OrderApi(ABC):
    """Abstract remote order/payment API.

    Every method raises TransportException when the call does not produce a
    usable response.
    """

    @abstractmethod
    async def create_order(self, draft: OrderDraftDTO) -> int:
        """Create the order remotely and return the server-assigned id."""
        pass

    @abstractmethod
    async def get_order(self, remote_id: int) -> RemoteOrderDTO:
        pass

    @abstractmethod
    async def list_orders(self, user_id: int) -> list[RemoteOrderDTO]:
        pass

    @abstractmethod
    async def update_order_status(self, remote_id: int, status: str) -> RemoteOrderDTO:
        pass

    @abstractmethod
    async def create_payment(self, order_id: int, amount: float, method: PaymentMethod,
                             return_url: str | None = None) -> PaymentRedirectDTO:
        """Create a provider payment; the returned confirmationUrl is opened by the caller."""
        pass

    async def close(self) -> None:
        pass
