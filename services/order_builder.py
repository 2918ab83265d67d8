import logging
import uuid

from enums.delivery_method import DeliveryMethod
from enums.payment_method import PaymentMethod
from exceptions.validation import (
    EmptyCartException,
    InvalidAddressException,
    InvalidPhoneException,
    InvalidNameException
)
from models.cart_line import CartLineDTO
from models.order import OrderDraftDTO, OrderLineSnapshotDTO
from models.session_context import SessionContext
from services.delivery_pricing import DeliveryPricingService
from services.zone_resolver import ZoneResolver
from utils.checkout_validation import validate_address, validate_phone, validate_name, normalize_phone

logger = logging.getLogger(__name__)


class OrderBuilder:
    """Turns the cart plus checkout form input into an immutable, priced OrderDraftDTO."""

    def __init__(self, resolver: ZoneResolver, pricing: DeliveryPricingService | None = None):
        self.resolver = resolver
        self.pricing = pricing or resolver.pricing

    def build(self,
              context: SessionContext,
              cart_lines: list[CartLineDTO],
              address: str,
              name: str,
              phone: str,
              notes: str = "",
              payment_method: PaymentMethod = PaymentMethod.CARD_ON_DELIVERY,
              delivery_method: DeliveryMethod = DeliveryMethod.DELIVERY) -> OrderDraftDTO:
        """
        Validate checkout input and price the order.

        Fails on the first problem, checked in this order: empty cart,
        address, phone, name. Nothing here touches the network.

        Raises:
            EmptyCartException, InvalidAddressException,
            InvalidPhoneException, InvalidNameException
        """
        if not cart_lines:
            raise EmptyCartException(context.user_id)

        is_valid, error = validate_address(address)
        if not is_valid:
            raise InvalidAddressException(error)

        is_valid, error = validate_phone(phone)
        if not is_valid:
            raise InvalidPhoneException(error)

        is_valid, error = validate_name(name)
        if not is_valid:
            raise InvalidNameException(error)

        lines = tuple(
            OrderLineSnapshotDTO(
                cart_line_id=line.id,
                product_id=line.product_id,
                name=line.name,
                unit_price=line.unit_price,
                image_ref=line.image_ref,
                quantity=line.quantity,
            )
            for line in cart_lines
        )
        subtotal = round(sum(line.line_total for line in lines), 2)

        zone = self.resolver.resolve(address)
        if delivery_method == DeliveryMethod.PICKUP:
            delivery_cost = 0.0
        else:
            delivery_cost = self.pricing.cost(zone, subtotal)

        draft = OrderDraftDTO(
            draft_id=str(uuid.uuid4()),
            user_id=context.user_id,
            lines=lines,
            delivery_address=address.strip(),
            customer_name=name.strip(),
            customer_phone=normalize_phone(phone),
            notes=(notes or "").strip(),
            payment_method=payment_method,
            delivery_method=delivery_method,
            zone_name=zone.name,
            subtotal=subtotal,
            delivery_cost=delivery_cost,
            total=round(subtotal + delivery_cost, 2),
        )
        logger.info(
            f"Draft {draft.draft_id} built for user {context.user_id}: "
            f"{len(lines)} lines, subtotal {subtotal}, delivery {delivery_cost} ({zone.name}), total {draft.total}"
        )
        return draft
