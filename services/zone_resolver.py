"""
Address-to-Zone Resolver

Best-effort keyword heuristic mapping a free-text delivery address to a
delivery zone. It is not a geocoder: it never fails, it only degrades to the
fallback ("standard") zone, so callers must not rely on zone accuracy.
"""

import logging

from models.delivery_zone import DeliveryZoneDTO, DeliveryEstimateDTO
from services.delivery_pricing import DeliveryPricingService
from utils.delivery_zones_loader import normalize_text

logger = logging.getLogger(__name__)


class ZoneResolver:

    def __init__(self, pricing: DeliveryPricingService):
        self.pricing = pricing
        # District markers first (table order), generic city markers of the fallback zone last
        self._priority: list[tuple[str, DeliveryZoneDTO]] = [
            (marker, zone)
            for zone in pricing.zones if not zone.is_fallback
            for marker in zone.markers
        ] + [(marker, pricing.fallback_zone) for marker in pricing.fallback_zone.markers]

    def resolve(self, address_text: str | None) -> DeliveryZoneDTO:
        """
        Resolve the delivery zone for an address.

        First marker found in the address wins, in priority order.

        Example:
            >>> resolver.resolve("г. Волжск, мкр Дружба, ул. Ленина 5").name
            'Дружба'
            >>> resolver.resolve("somewhere else").name
            'Стандартная зона'
        """
        normalized = normalize_text(address_text or "")

        for marker, zone in self._priority:
            if marker and marker in normalized:
                if zone.is_fallback:
                    logger.info(f"[ZoneResolver] Only city matched ('{marker}'), using zone '{zone.name}'")
                else:
                    logger.debug(f"[ZoneResolver] Matched marker '{marker}' -> zone '{zone.name}'")
                return zone

        # PricingResolutionFallback: observable, never blocks checkout
        logger.warning(
            f"[ZoneResolver] No zone marker in address, falling back to '{self.pricing.fallback_zone.name}'"
        )
        return self.pricing.fallback_zone

    def estimate(self, address_text: str | None, subtotal: float) -> DeliveryEstimateDTO:
        zone = self.resolve(address_text)
        return self.pricing.estimate(zone, subtotal)
