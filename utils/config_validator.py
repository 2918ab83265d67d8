"""
Startup checks for config.py values.

A storefront that cannot reach its order API or hands the payment provider a
broken return URL only fails at the first checkout; run.py calls
validate_or_exit() so it fails at boot instead.
"""

import sys
from urllib.parse import urlsplit


class ConfigValidationError(Exception):
    pass


def validate_url(value: str | None, name: str, example: str = "") -> None:
    """Absolute http(s) URL, e.g. ORDER_API_URL."""
    if not value:
        hint = f"\nAdd to .env: {name}={example}" if example else ""
        raise ConfigValidationError(f"{name} is required but not set!{hint}")

    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigValidationError(f"{name} must be an absolute http(s) URL, got '{value}'")


def validate_positive(value, name: str) -> None:
    if value is None or value <= 0:
        raise ConfigValidationError(f"{name} must be greater than 0 (currently: {value})")


def validate_startup_config(config_module) -> None:
    """
    Raises:
        ConfigValidationError: on the first invalid value
    """
    validate_url(config_module.ORDER_API_URL, 'ORDER_API_URL', 'https://api.example.com/api/v1/')
    validate_url(config_module.PAYMENT_RETURN_URL, 'PAYMENT_RETURN_URL', 'https://shop.example.com/payment/')

    for name in ('ORDER_API_TIMEOUT_SECONDS', 'MIN_ADDRESS_LENGTH', 'MIN_NAME_LENGTH'):
        validate_positive(getattr(config_module, name), name)

    if not config_module.PAYMENT_RETURN_PATH.startswith("/"):
        raise ConfigValidationError(
            f"PAYMENT_RETURN_PATH must start with '/' (currently: '{config_module.PAYMENT_RETURN_PATH}')"
        )


def validate_or_exit(config_module) -> None:
    """Print the problem to stderr and exit with status 1 if the config is unusable."""
    try:
        validate_startup_config(config_module)
    except ConfigValidationError as e:
        print(f"\n ERROR: Configuration Validation Failed\n\n{e}\n", file=sys.stderr)
        print("Startup aborted. Fix the configuration and try again.\n", file=sys.stderr)
        sys.exit(1)
