"""
Unit Tests for DeliveryPricingService and the zone table loader.
"""

import json

import pytest

from models.delivery_zone import DeliveryZoneDTO
from services.delivery_pricing import DeliveryPricingService
from utils.delivery_zones_loader import load_delivery_zones, validate_zone_table, normalize_text


def make_zone(key="druzhba", name="Дружба", base_cost=100.0, threshold=800.0, is_fallback=False):
    return DeliveryZoneDTO(
        key=key, name=name, base_cost=base_cost, free_delivery_threshold=threshold, is_fallback=is_fallback
    )


class TestCost:
    """Test the pure cost function."""

    def test_below_threshold_pays_base_cost(self):
        assert DeliveryPricingService.cost(make_zone(), 799.99) == 100.0

    def test_threshold_is_inclusive(self):
        assert DeliveryPricingService.cost(make_zone(), 800.0) == 0.0

    def test_above_threshold_is_free(self):
        assert DeliveryPricingService.cost(make_zone(), 1300.0) == 0.0

    def test_empty_subtotal_pays_base_cost(self):
        assert DeliveryPricingService.cost(make_zone(), 0.0) == 100.0


class TestZoneTable:
    """Test the shipped Volzhsk table."""

    def test_druzhba(self, pricing):
        zone = pricing.get_zone("Дружба")
        assert (zone.base_cost, zone.free_delivery_threshold) == (100.0, 800.0)

    def test_promuzel(self, pricing):
        zone = pricing.get_zone("Промузел")
        assert (zone.base_cost, zone.free_delivery_threshold) == (300.0, 1500.0)

    def test_zarya(self, pricing):
        zone = pricing.get_zone("Заря")
        assert (zone.base_cost, zone.free_delivery_threshold) == (250.0, 1200.0)

    def test_lookup_by_key_and_case_insensitive(self, pricing):
        assert pricing.get_zone("pribrezhny").name == "Прибрежный"
        assert pricing.get_zone("  центральный ").name == "Центральный"

    def test_unknown_name_falls_back_to_standard(self, pricing, caplog):
        zone = pricing.get_zone("Луна")

        assert zone.is_fallback
        assert zone.name == "Стандартная зона"
        assert (zone.base_cost, zone.free_delivery_threshold) == (200.0, 1000.0)
        assert "Unknown delivery zone" in caplog.text

    def test_cost_for_zone_name(self, pricing):
        assert pricing.cost_for_zone_name("Промузел", 1300.0) == 300.0
        assert pricing.cost_for_zone_name("Промузел", 1500.0) == 0.0
        assert pricing.cost_for_zone_name(None, 999.0) == 200.0

    def test_estimate(self, pricing):
        estimate = pricing.estimate(pricing.get_zone("Промузел"), 1300.0)

        assert estimate.zone_name == "Промузел"
        assert estimate.delivery_cost == 300.0
        assert estimate.is_delivery_free is False
        assert estimate.amount_to_free_delivery == 200.0

    def test_estimate_free(self, pricing):
        estimate = pricing.estimate(pricing.get_zone("Дружба"), 1300.0)

        assert estimate.is_delivery_free is True
        assert estimate.amount_to_free_delivery == 0.0


class TestValidateZoneTable:

    def test_valid(self):
        zones = [make_zone(), make_zone(key="standard", name="Стандартная зона", is_fallback=True)]
        assert validate_zone_table(zones) == (True, None)

    def test_empty(self):
        is_valid, error = validate_zone_table([])
        assert not is_valid
        assert "At least one" in error

    def test_missing_fallback(self):
        is_valid, error = validate_zone_table([make_zone()])
        assert not is_valid
        assert "fallback" in error

    def test_duplicate_keys(self):
        zones = [make_zone(), make_zone(is_fallback=True)]
        is_valid, error = validate_zone_table(zones)
        assert not is_valid
        assert "unique" in error

    def test_negative_cost(self):
        zones = [make_zone(base_cost=-1.0), make_zone(key="standard", is_fallback=True)]
        is_valid, error = validate_zone_table(zones)
        assert not is_valid
        assert "base_cost" in error


class TestLoadDeliveryZones:

    def test_loads_shipped_table_in_priority_order(self):
        zones = load_delivery_zones("volzhsk")

        assert zones[0].name == "Дружба"
        assert zones[-1].is_fallback
        assert len(zones) == 10

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_delivery_zones("nowhere", zones_dir=tmp_path)

    def test_invalid_table_rejected(self, tmp_path):
        (tmp_path / "broken.json").write_text(json.dumps({
            "zones": [{"key": "a", "name": "A", "base_cost": 100, "free_delivery_threshold": 500}]
        }), encoding="utf-8")

        with pytest.raises(ValueError, match="fallback"):
            load_delivery_zones("broken", zones_dir=tmp_path)

    def test_markers_are_normalized(self, tmp_path):
        (tmp_path / "town.json").write_text(json.dumps({
            "zones": [{"key": "s", "name": "S", "base_cost": 1, "free_delivery_threshold": 2,
                       "markers": ["Ёлкино"], "is_fallback": True}]
        }), encoding="utf-8")

        zones = load_delivery_zones("town", zones_dir=tmp_path)

        assert zones[0].markers == ("елкино",)


def test_normalize_text():
    assert normalize_text("Промузёл ВДК") == "промузел вдк"
