import os
import sys

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test scripts to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", "DEV"))
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Local store
DB_NAME = os.environ.get("DB_NAME", "storefront.db")
DB_URL = os.environ.get("DB_URL", f"sqlite+aiosqlite:///data/{DB_NAME}")

# Remote order API
ORDER_API_URL = os.environ.get("ORDER_API_URL", "http://localhost:8080/api/v1/")
ORDER_API_TIMEOUT_SECONDS = float(os.environ.get("ORDER_API_TIMEOUT_SECONDS", "15"))
CURRENCY = os.environ.get("CURRENCY", "RUB")

# Delivery pricing
# Selects delivery_zones/<city>.json
DELIVERY_CITY = os.environ.get("DELIVERY_CITY", "volzhsk")

# Checkout validation
MIN_ADDRESS_LENGTH = int(os.environ.get("MIN_ADDRESS_LENGTH", "10"))
MIN_NAME_LENGTH = int(os.environ.get("MIN_NAME_LENGTH", "2"))

# Payment redirection
# PAYMENT_RETURN_URL is handed to the payment provider, PAYMENT_RETURN_PATH is where
# processing/payment_return.py listens for it.
PAYMENT_RETURN_PATH = os.environ.get("PAYMENT_RETURN_PATH", "/payment/")
PAYMENT_RETURN_URL = os.environ.get("PAYMENT_RETURN_URL", f"http://localhost:8000{PAYMENT_RETURN_PATH}")

WEBAPP_HOST = os.environ.get("WEBAPP_HOST", "0.0.0.0")
WEBAPP_PORT = int(os.environ.get("WEBAPP_PORT", "8000"))

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG" if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV else "INFO")
LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5" if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV else "30"))
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true").lower() == "true"
