"""
Delivery Pricing Service

Zone-based delivery cost: every zone has a flat base cost that is waived once
the order subtotal reaches the zone's free-delivery threshold.
"""

import logging

import config
from models.delivery_zone import DeliveryZoneDTO, DeliveryEstimateDTO
from utils.delivery_zones_loader import load_delivery_zones, normalize_text

logger = logging.getLogger(__name__)


class DeliveryPricingService:
    """Static zone table plus the pure pricing function over it."""

    def __init__(self, zones: list[DeliveryZoneDTO]):
        self.zones = list(zones)
        self.fallback_zone = next(zone for zone in self.zones if zone.is_fallback)
        self._by_name = {}
        for zone in self.zones:
            self._by_name[normalize_text(zone.name)] = zone
            self._by_name[normalize_text(zone.key)] = zone

    @classmethod
    def from_config(cls) -> "DeliveryPricingService":
        return cls(load_delivery_zones(config.DELIVERY_CITY))

    @staticmethod
    def cost(zone: DeliveryZoneDTO, subtotal: float) -> float:
        """
        Delivery cost for a zone and an order subtotal.

        The threshold is inclusive: a subtotal exactly equal to it delivers free.

        Example:
            >>> zone = DeliveryZoneDTO(key="druzhba", name="Дружба", base_cost=100.0, free_delivery_threshold=800.0)
            >>> DeliveryPricingService.cost(zone, 800.0)
            0.0
            >>> DeliveryPricingService.cost(zone, 799.99)
            100.0
        """
        if subtotal >= zone.free_delivery_threshold:
            return 0.0
        return zone.base_cost

    def get_zone(self, name: str | None) -> DeliveryZoneDTO:
        """Zone by display name or key. Unknown names resolve to the fallback zone."""
        if name:
            zone = self._by_name.get(normalize_text(name.strip()))
            if zone is not None:
                return zone
        logger.warning(f"Unknown delivery zone '{name}', using '{self.fallback_zone.name}'")
        return self.fallback_zone

    def cost_for_zone_name(self, name: str | None, subtotal: float) -> float:
        return self.cost(self.get_zone(name), subtotal)

    def estimate(self, zone: DeliveryZoneDTO, subtotal: float) -> DeliveryEstimateDTO:
        delivery_cost = self.cost(zone, subtotal)
        return DeliveryEstimateDTO(
            zone_name=zone.name,
            delivery_cost=delivery_cost,
            is_delivery_free=delivery_cost == 0.0,
            free_delivery_threshold=zone.free_delivery_threshold,
            amount_to_free_delivery=round(max(zone.free_delivery_threshold - subtotal, 0.0), 2),
            is_fallback=zone.is_fallback,
        )
