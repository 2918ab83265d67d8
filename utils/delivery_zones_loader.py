"""
Delivery Zones Loader

Loads delivery zone pricing tables from city-specific JSON files.
Similar to localization (l10n), every city the shop delivers to has its own table.

Usage:
    from utils.delivery_zones_loader import load_delivery_zones

    zones = load_delivery_zones("volzhsk")
"""

import json
import logging
from pathlib import Path

from models.delivery_zone import DeliveryZoneDTO

logger = logging.getLogger(__name__)


def load_delivery_zones(city: str = "volzhsk", zones_dir: Path | None = None) -> list[DeliveryZoneDTO]:
    """
    Load delivery zones from city-specific JSON file.

    The order of the "zones" list is the marker priority order used by the
    address resolver, so more specific districts must come before the zone
    carrying the generic city name.

    Args:
        city: Table name (e.g., "volzhsk")
        zones_dir: Directory holding the tables, defaults to <project>/delivery_zones

    Returns:
        list[DeliveryZoneDTO]: Zones in priority order

    Raises:
        FileNotFoundError: If zones file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If the table fails validate_zone_table()

    Example:
        >>> zones = load_delivery_zones("volzhsk")
        >>> zones[0].name
        'Дружба'
    """
    zones_dir = zones_dir or Path(__file__).parent.parent / "delivery_zones"
    zones_path = zones_dir / f"{city}.json"

    if not zones_path.exists():
        raise FileNotFoundError(
            f"Delivery zones file not found: {zones_path}\n"
            f"Please create delivery_zones/{city}.json"
        )

    try:
        with open(zones_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {zones_path}: {e}")
        raise

    zones = [
        DeliveryZoneDTO(
            key=entry["key"],
            name=entry["name"],
            base_cost=float(entry["base_cost"]),
            free_delivery_threshold=float(entry["free_delivery_threshold"]),
            markers=tuple(normalize_text(marker) for marker in entry.get("markers", [])),
            is_fallback=bool(entry.get("is_fallback", False)),
        )
        for entry in raw.get("zones", [])
    ]

    is_valid, error = validate_zone_table(zones)
    if not is_valid:
        raise ValueError(f"Invalid delivery zones table {zones_path}: {error}")

    logger.info(f"Loaded {len(zones)} delivery zones from {city}.json")
    return zones


def validate_zone_table(zones: list[DeliveryZoneDTO]) -> tuple[bool, str | None]:
    """
    Validate a zone table.

    Checks for:
    - At least one zone exists
    - Exactly one fallback zone
    - Unique keys
    - Non-negative costs and thresholds

    Returns:
        tuple: (is_valid, error_message)
    """
    if not zones:
        return False, "At least one delivery zone is required"

    fallback_count = sum(1 for zone in zones if zone.is_fallback)
    if fallback_count != 1:
        return False, f"Exactly one fallback zone is required, found {fallback_count}"

    keys = [zone.key for zone in zones]
    if len(keys) != len(set(keys)):
        return False, "Zone keys must be unique"

    for zone in zones:
        if zone.base_cost < 0:
            return False, f"base_cost must be >= 0 for zone '{zone.key}', got {zone.base_cost}"
        if zone.free_delivery_threshold < 0:
            return False, f"free_delivery_threshold must be >= 0 for zone '{zone.key}', got {zone.free_delivery_threshold}"

    return True, None


def normalize_text(text: str) -> str:
    """Lower-case and fold ё into е so markers match however the address was typed."""
    return text.lower().replace("ё", "е")
