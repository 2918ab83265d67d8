from enum import Enum


class DeliveryMethod(str, Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"
