from enum import Enum


class ValidationErrorKind(str, Enum):
    EMPTY_CART = "EMPTY_CART"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_PHONE = "INVALID_PHONE"
    INVALID_NAME = "INVALID_NAME"
