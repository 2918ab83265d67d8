"""aiohttp implementation of the remote order API."""

import asyncio
import logging

import aiohttp
from pydantic import ValidationError

import config
from enums.payment_method import PaymentMethod
from exceptions.transport import TransportException
from models.order import OrderDraftDTO, RemoteOrderDTO, CreateOrderRequestDTO, RemoteOrderPageDTO
from models.payment import CreatePaymentRequestDTO, PaymentRedirectDTO
from order_api.base import OrderApi

logger = logging.getLogger(__name__)


class HttpOrderApi(OrderApi):
    """
    Talks camelCase JSON to the backend under config.ORDER_API_URL.

    Endpoints:
        POST orders
        GET  orders/{id}
        GET  orders
        PUT  admin/orders/{id}/status
        POST payments/yookassa/create
    """

    def __init__(self, base_url: str | None = None, auth_token: str | None = None,
                 timeout: float | None = None, session: aiohttp.ClientSession | None = None):
        self.base_url = (base_url or config.ORDER_API_URL).rstrip("/") + "/"
        self.auth_token = auth_token
        self.timeout = aiohttp.ClientTimeout(total=timeout or config.ORDER_API_TIMEOUT_SECONDS)
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"Accept": "application/json"}
            if self.auth_token:
                headers["Authorization"] = f"Bearer {self.auth_token}"
            self._session = aiohttp.ClientSession(headers=headers, timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> dict:
        url = self.base_url + path
        try:
            async with self._get_session().request(method, url, **kwargs) as response:
                if response.status >= 400:
                    body = await response.text()
                    logger.warning(f"[OrderApi] {operation}: HTTP {response.status} from {method} {path}")
                    raise TransportException(operation, f"HTTP {response.status}: {body[:200]}", response.status)
                return await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            logger.warning(f"[OrderApi] {operation}: timeout on {method} {path}")
            raise TransportException(operation, "timeout") from e
        except aiohttp.ContentTypeError as e:
            raise TransportException(operation, f"malformed response body: {e.message}") from e
        except aiohttp.ClientError as e:
            logger.warning(f"[OrderApi] {operation}: {e.__class__.__name__} on {method} {path}")
            raise TransportException(operation, str(e) or e.__class__.__name__) from e
        except ValueError as e:
            raise TransportException(operation, "response is not valid JSON") from e

    @staticmethod
    def _parse(operation: str, model, payload):
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise TransportException(operation, f"malformed response body: {e.error_count()} errors") from e

    async def create_order(self, draft: OrderDraftDTO) -> int:
        request = CreateOrderRequestDTO.from_draft(draft)
        payload = await self._request("create_order", "POST", "orders", json=request.model_dump(mode="json"))
        if not isinstance(payload, dict) or "id" not in payload:
            raise TransportException("create_order", "response has no order id")
        try:
            remote_id = int(payload["id"])
        except (TypeError, ValueError) as e:
            raise TransportException("create_order", f"malformed order id {payload['id']!r}") from e
        logger.info(f"[OrderApi] Draft {draft.draft_id} created remotely as order {remote_id}")
        return remote_id

    async def get_order(self, remote_id: int) -> RemoteOrderDTO:
        payload = await self._request("get_order", "GET", f"orders/{remote_id}")
        return self._parse("get_order", RemoteOrderDTO, payload)

    async def list_orders(self, user_id: int) -> list[RemoteOrderDTO]:
        # The backend scopes the listing by the bearer token, user_id filters what comes back
        payload = await self._request("list_orders", "GET", "orders", params={"page": 0, "size": 50})
        page = self._parse("list_orders", RemoteOrderPageDTO, payload)
        return [order for order in page.orders if order.userId in (None, user_id)]

    async def update_order_status(self, remote_id: int, status: str) -> RemoteOrderDTO:
        payload = await self._request("update_order_status", "PUT", f"admin/orders/{remote_id}/status",
                                      json={"status": status})
        return self._parse("update_order_status", RemoteOrderDTO, payload)

    async def create_payment(self, order_id: int, amount: float, method: PaymentMethod,
                             return_url: str | None = None) -> PaymentRedirectDTO:
        request = CreatePaymentRequestDTO(
            orderId=order_id,
            amount=amount,
            currency=config.CURRENCY,
            method=method,
            description=f"Order #{order_id}",
            returnUrl=return_url or config.PAYMENT_RETURN_URL,
        )
        payload = await self._request("create_payment", "POST", "payments/yookassa/create",
                                      json=request.model_dump(mode="json"))
        return self._parse("create_payment", PaymentRedirectDTO, payload)
