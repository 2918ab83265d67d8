from pydantic import BaseModel, ConfigDict


class DeliveryZoneDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    base_cost: float
    free_delivery_threshold: float
    # Lower-case substrings of an address that place it in this zone
    markers: tuple[str, ...] = ()
    is_fallback: bool = False


class DeliveryEstimateDTO(BaseModel):
    zone_name: str
    delivery_cost: float
    is_delivery_free: bool
    free_delivery_threshold: float
    amount_to_free_delivery: float
    is_fallback: bool = False
