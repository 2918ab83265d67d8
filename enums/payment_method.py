from enum import Enum


class PaymentMethod(str, Enum):
    """
    CARD_ON_DELIVERY: paid to the courier, no redirection
    SBP: fast payment system, paid through the provider page or a banking app
    """
    CARD_ON_DELIVERY = "CARD_ON_DELIVERY"
    SBP = "SBP"
