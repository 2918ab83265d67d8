"""
Checkout Form Validation Utility

Validates the customer-entered checkout fields:
- Delivery address (non-blank, minimum length)
- Phone number (Russian national format)
- Customer name (non-blank, minimum length)
"""

import re

import config

# Everything but digits is formatting: "+", spaces, brackets, dashes, dots
PHONE_NON_DIGITS = re.compile(r"\D")
PHONE_PATTERN = re.compile(r"^[78](\d{10})$")


def validate_address(address: str | None) -> tuple[bool, str | None]:
    """
    Returns:
        tuple: (is_valid, error_message)
    """
    address = (address or "").strip()
    if not address:
        return False, "address is blank"
    if len(address) < config.MIN_ADDRESS_LENGTH:
        return False, f"address must be at least {config.MIN_ADDRESS_LENGTH} characters"
    return True, None


def validate_phone(phone: str | None) -> tuple[bool, str | None]:
    """
    Accepts 11 digits starting with 7 or 8 once formatting is stripped:
    +7XXXXXXXXXX, 7XXXXXXXXXX, 8XXXXXXXXXX, 8.999.123.45.67 and so on.

    Example:
        >>> validate_phone("+7 (999) 123-45-67")
        (True, None)
        >>> validate_phone("12345")
        (False, 'expected 11 digits starting with 7 or 8')
    """
    stripped = PHONE_NON_DIGITS.sub("", phone or "")
    if not stripped:
        return False, "phone is blank"
    if PHONE_PATTERN.match(stripped) is None:
        return False, "expected 11 digits starting with 7 or 8"
    return True, None


def normalize_phone(phone: str) -> str:
    """Bring a valid phone to +7XXXXXXXXXX."""
    stripped = PHONE_NON_DIGITS.sub("", phone)
    match = PHONE_PATTERN.match(stripped)
    if match is None:
        raise ValueError(f"Not a valid phone number: {phone!r}")
    return f"+7{match.group(1)}"


def validate_name(name: str | None) -> tuple[bool, str | None]:
    name = (name or "").strip()
    if not name:
        return False, "name is blank"
    if len(name) < config.MIN_NAME_LENGTH:
        return False, f"name must be at least {config.MIN_NAME_LENGTH} characters"
    return True, None
