"""
Unit Tests for ZoneResolver.

The resolver is a keyword heuristic: district names win over the bare city
name, and anything unrecognized lands in the standard zone.
"""

import logging


class TestResolve:

    def test_district_marker(self, resolver):
        assert resolver.resolve("г. Волжск, мкр Дружба, ул. Ленина 5").name == "Дружба"

    def test_district_wins_over_city_marker(self, resolver):
        # "волжск" appears first in the text, the district still decides
        assert resolver.resolve("Волжск, Промузел, склад 3").name == "Промузел"

    def test_case_and_yo_insensitive(self, resolver):
        assert resolver.resolve("МАШИНОСТРОИТЕЛЬ, д. 1").name == "Машиностроитель"
        assert resolver.resolve("пос. Северныи").is_fallback

    def test_city_only_uses_standard_zone(self, resolver, caplog):
        caplog.set_level(logging.INFO)

        zone = resolver.resolve("г. Волжск, ул. Шестакова 10")

        assert zone.name == "Стандартная зона"
        assert "Only city matched" in caplog.text

    def test_unknown_address_falls_back_with_warning(self, resolver, caplog):
        zone = resolver.resolve("Казань, ул. Баумана 1")

        assert zone.is_fallback
        assert any(record.levelno == logging.WARNING for record in caplog.records)

    def test_blank_address_falls_back(self, resolver):
        assert resolver.resolve(None).is_fallback
        assert resolver.resolve("").is_fallback


class TestEstimate:

    def test_druzhba_free_above_threshold(self, resolver):
        estimate = resolver.estimate("мкр Дружба, 5", 1300.0)

        assert estimate.zone_name == "Дружба"
        assert estimate.delivery_cost == 0.0

    def test_promuzel_paid_below_threshold(self, resolver):
        estimate = resolver.estimate("Промузел, 7", 1300.0)

        assert estimate.delivery_cost == 300.0
        assert estimate.is_fallback is False

    def test_fallback_flagged(self, resolver):
        assert resolver.estimate("где-то", 100.0).is_fallback is True
