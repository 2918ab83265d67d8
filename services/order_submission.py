"""
Order Submission Pipeline

Takes a validated OrderDraftDTO through local persistence, remote creation and
reconciliation:

    DRAFT -> PENDING_LOCAL_PERSIST -> PENDING_REMOTE_SUBMIT -> SUBMITTED -> CONFIRMED | CANCELLED | FAILED

The order is durable locally before the remote call is made. The cart lines
included in the order are removed only once the server has accepted it, in the
same transaction that records the server-assigned id. A failed remote call
leaves the order in PENDING_REMOTE_SUBMIT and the cart untouched; retrying is
up to the caller.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db import get_db_session
from enums.order_status import OrderStatus
from enums.payment_outcome import PaymentOutcomeKind
from exceptions.order import OrderNotFoundException, StateConflictException, OrderSubmissionFailedException
from exceptions.payment import MissingConfirmationUrlException
from exceptions.transport import TransportException
from models.order import OrderDTO, OrderDraftDTO, OrderLineSnapshotDTO, RemoteOrderDTO
from models.payment import PaymentOutcome, PaymentRedirectDTO
from models.session_context import SessionContext
from order_api.base import OrderApi
from repositories.cart_line import CartLineRepository
from repositories.order import OrderRepository
from services.cart import CartStore
from utils.order_state_machine import OrderStateMachine
from utils.transaction_manager import TransactionManager

logger = logging.getLogger(__name__)


class OrderSubmissionPipeline:
    # Raw backend statuses -> local lifecycle
    REMOTE_STATUS_MAP = {
        "PENDING": OrderStatus.SUBMITTED,
        "CONFIRMED": OrderStatus.CONFIRMED,
        "PREPARING": OrderStatus.CONFIRMED,
        "READY": OrderStatus.CONFIRMED,
        "DELIVERING": OrderStatus.CONFIRMED,
        "DELIVERED": OrderStatus.CONFIRMED,
        "CANCELLED": OrderStatus.CANCELLED,
    }

    PAYMENT_OUTCOME_STATUS = {
        PaymentOutcomeKind.SUCCESS: OrderStatus.CONFIRMED,
        PaymentOutcomeKind.FAILED: OrderStatus.FAILED,
        # CANCELLED: customer backed out of the payment page, order stays payable
    }

    def __init__(self, order_api: OrderApi, cart_store: CartStore,
                 session_maker: async_sessionmaker[AsyncSession] | None = None):
        self.order_api = order_api
        self.cart_store = cart_store
        self.session_maker = session_maker or cart_store.session_maker
        # Single writer per order (keyed by local id) and per draft (keyed by draft id)
        self._locks: dict[int | str, asyncio.Lock] = {}
        self._lock_users: dict[int | str, int] = {}

    @asynccontextmanager
    async def _locked(self, key: int | str):
        """Hold the lock for key. The entry is dropped once no task holds or waits for it."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if self._lock_users[key] == 0:
                del self._lock_users[key]
                del self._locks[key]

    async def submit(self, draft: OrderDraftDTO) -> int:
        """
        Persist the draft locally, create it remotely and reconcile.

        Submitting the same draft again never creates a second order: an
        already submitted draft returns its remote id without calling the API,
        a draft stuck in PENDING_REMOTE_SUBMIT is re-sent.

        Returns:
            int: remote (server-assigned) order id

        Raises:
            OrderSubmissionFailedException: remote call failed, order kept locally
            asyncio.CancelledError: caller cancelled, order kept locally
        """
        async with self._locked(f"draft:{draft.draft_id}"):
            async with get_db_session(self.session_maker) as session:
                existing = await OrderRepository.get_by_draft_id(draft.draft_id, session)

            if existing is not None:
                if existing.remote_id is not None:
                    logger.info(f"Draft {draft.draft_id} already submitted as remote order {existing.remote_id}")
                    return existing.remote_id
                logger.info(f"Draft {draft.draft_id} already saved as order {existing.id}, re-sending")
                return await self._submit_remote(existing.id, draft)

            local_order_id = await self._persist_locally(draft)
            return await self._submit_remote(local_order_id, draft)

    async def retry(self, local_order_id: int) -> int:
        """Re-send an order left in PENDING_REMOTE_SUBMIT."""
        order = await self.get_order(local_order_id)
        return await self._submit_remote(local_order_id, self._draft_from_order(order))

    @TransactionManager.with_retry()
    async def _persist_locally(self, draft: OrderDraftDTO) -> int:
        OrderStateMachine.validate_and_log_transition(
            draft.draft_id, OrderStatus.DRAFT, OrderStatus.PENDING_LOCAL_PERSIST, draft.user_id
        )
        async with TransactionManager.atomic_transaction(self.session_maker) as session:
            local_order_id = await OrderRepository.create_from_draft(
                draft, OrderStatus.PENDING_REMOTE_SUBMIT, session
            )
        OrderStateMachine.validate_and_log_transition(
            local_order_id, OrderStatus.PENDING_LOCAL_PERSIST, OrderStatus.PENDING_REMOTE_SUBMIT, draft.user_id
        )
        return local_order_id

    async def _submit_remote(self, local_order_id: int, draft: OrderDraftDTO) -> int:
        async with self._locked(local_order_id):
            order = await self.get_order(local_order_id)
            if order.remote_id is not None:
                return order.remote_id
            if order.status != OrderStatus.PENDING_REMOTE_SUBMIT:
                raise StateConflictException(local_order_id, order.status.value, OrderStatus.SUBMITTED.value)

            try:
                remote_id = await self.order_api.create_order(draft)
            except asyncio.CancelledError:
                logger.warning(f"Submit of order {local_order_id} cancelled, order kept in PENDING_REMOTE_SUBMIT")
                raise
            except TransportException as e:
                logger.error(f"Remote submit of order {local_order_id} failed: {e}")
                async with TransactionManager.atomic_transaction(self.session_maker) as session:
                    await OrderRepository.set_last_error(local_order_id, str(e), session)
                raise OrderSubmissionFailedException(local_order_id, e.reason) from e

            async with self.cart_store.lock:
                async with TransactionManager.atomic_transaction(self.session_maker) as session:
                    await OrderRepository.reconcile_remote_id(local_order_id, remote_id, session)
                    line_ids = await self._included_line_ids(draft, session)
                    await self.cart_store.remove_lines(line_ids, session)
                lines = await self.cart_store.snapshot()
            await self.cart_store.notify(lines)

            OrderStateMachine.validate_and_log_transition(
                local_order_id, OrderStatus.PENDING_REMOTE_SUBMIT, OrderStatus.SUBMITTED, draft.user_id
            )
            return remote_id

    @staticmethod
    async def _included_line_ids(draft: OrderDraftDTO, session: AsyncSession) -> list[int]:
        line_ids = [line.cart_line_id for line in draft.lines if line.cart_line_id is not None]
        if line_ids:
            return line_ids
        # Rebuilt drafts (retry) do not know their cart lines, match by product
        product_ids = {line.product_id for line in draft.lines}
        return [line.id for line in await CartLineRepository.get_all(session) if line.product_id in product_ids]

    @staticmethod
    def _draft_from_order(order: OrderDTO) -> OrderDraftDTO:
        return OrderDraftDTO(
            draft_id=order.client_draft_id,
            user_id=order.user_id,
            lines=tuple(
                OrderLineSnapshotDTO(
                    product_id=item.product_id,
                    name=item.name,
                    unit_price=item.unit_price,
                    image_ref=item.image_ref,
                    quantity=item.quantity,
                )
                for item in order.items
            ),
            delivery_address=order.delivery_address,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            notes=order.notes or "",
            payment_method=order.payment_method,
            delivery_method=order.delivery_method,
            zone_name=order.zone_name or "",
            subtotal=round(order.total_amount - order.delivery_cost, 2),
            delivery_cost=order.delivery_cost,
            total=order.total_amount,
        )

    async def list_pending(self) -> list[OrderDTO]:
        async with get_db_session(self.session_maker) as session:
            return await OrderRepository.get_by_status(OrderStatus.PENDING_REMOTE_SUBMIT, session)

    async def update_status(self, order_id: int, new_status: OrderStatus, user_id: int | None = None) -> OrderDTO:
        """
        Move a local order to a new status.

        Same status is a no-op. Anything the state machine does not allow,
        including every transition out of CONFIRMED or CANCELLED, is logged
        and raises StateConflictException without touching the order.
        """
        async with self._locked(order_id):
            async with get_db_session(self.session_maker) as session:
                order = await OrderRepository.get_by_id(order_id, session)
            if order is None:
                raise OrderNotFoundException(order_id)
            if order.status == new_status:
                return order
            if not OrderStateMachine.validate_and_log_transition(order_id, order.status, new_status, user_id):
                raise StateConflictException(order_id, order.status.value, new_status.value)

            async with TransactionManager.atomic_transaction(self.session_maker) as session:
                await OrderRepository.update_status(order_id, new_status, session)
                return await OrderRepository.get_by_id(order_id, session)

    async def refresh_status(self, order_id: int) -> OrderDTO:
        """
        Fetch the order from the backend and bring the local status in line.

        The raw remote status is always stored. A mapped status the local
        lifecycle does not allow is logged and ignored.

        Raises:
            TransportException: backend unreachable
        """
        order = await self.get_order(order_id)
        if order.remote_id is None:
            logger.info(f"Order {order_id} has no remote id yet, nothing to refresh")
            return order

        remote = await self.order_api.get_order(order.remote_id)
        async with TransactionManager.atomic_transaction(self.session_maker) as session:
            await OrderRepository.update_remote_status(order_id, remote.status, session)

        mapped = self.REMOTE_STATUS_MAP.get(remote.status.upper())
        if mapped is None:
            logger.warning(f"Order {order_id}: unknown remote status '{remote.status}', local status kept")
            return await self.get_order(order_id)
        try:
            return await self.update_status(order_id, mapped)
        except StateConflictException as e:
            logger.warning(f"Order {order_id}: remote status '{remote.status}' ignored: {e}")
            return await self.get_order(order_id)

    async def apply_payment_outcome(self, outcome: PaymentOutcome, order_id: int | None = None) -> OrderDTO | None:
        """
        Drive the order status from a payment redirect outcome.

        order_id and outcome.order_id are remote ids; the outcome's own id wins.
        Error and cancelled outcomes, and outcomes without any order id, change
        nothing: a cancelled payment leaves the order open for another attempt.
        """
        if outcome.kind == PaymentOutcomeKind.ERROR:
            logger.warning(f"Payment returned an error for order {order_id}: {outcome.message}")
            return None

        remote_id = outcome.order_id or order_id
        if remote_id is None:
            logger.warning(f"Payment outcome {outcome.kind.value} carries no order id, ignored")
            return None

        async with get_db_session(self.session_maker) as session:
            order = await OrderRepository.get_by_remote_id(remote_id, session)
        if order is None:
            raise OrderNotFoundException(remote_id)

        new_status = self.PAYMENT_OUTCOME_STATUS.get(outcome.kind)
        if new_status is None:
            logger.info(f"Payment for order {order.id} (remote {remote_id}) abandoned, order stays {order.status.value}")
            return order

        logger.info(f"Payment outcome {outcome.kind.value} for order {order.id} (remote {remote_id})")
        return await self.update_status(order.id, new_status)

    async def start_payment(self, order_id: int, return_url: str | None = None) -> PaymentRedirectDTO:
        """
        Create a provider payment for a submitted order.

        Raises:
            StateConflictException: order not submitted yet or already final
            MissingConfirmationUrlException: provider returned nothing to open
        """
        order = await self.get_order(order_id)
        if order.remote_id is None or order.status not in (OrderStatus.SUBMITTED, OrderStatus.FAILED):
            raise StateConflictException(order_id, order.status.value, "PAYMENT")

        payment = await self.order_api.create_payment(
            order.remote_id, order.total_amount, order.payment_method, return_url
        )
        if not payment.confirmationUrl:
            raise MissingConfirmationUrlException(order.remote_id, payment.id)
        logger.info(f"Payment {payment.id} created for order {order_id}")
        return payment

    async def get_order(self, order_id: int) -> OrderDTO:
        async with get_db_session(self.session_maker) as session:
            order = await OrderRepository.get_by_id(order_id, session)
        if order is None:
            raise OrderNotFoundException(order_id)
        return order

    async def list_orders(self, context: SessionContext) -> list[RemoteOrderDTO]:
        """Orders of the session user as the backend knows them. TransportException propagates."""
        return await self.order_api.list_orders(context.user_id)

    async def list_local_orders(self, context: SessionContext) -> list[OrderDTO]:
        async with get_db_session(self.session_maker) as session:
            return await OrderRepository.get_by_user_id(context.user_id, session)
