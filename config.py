import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Revenue split
    PLATFORM_FEE_PERCENTAGE = data.get("PLATFORM_FEE_PERCENTAGE", 10)
    ALLOW_SELF_EARNINGS = bool(data.get("ALLOW_SELF_EARNINGS", True))

    # Payouts
    MINIMUM_PAYOUT_CENTS = data.get("MINIMUM_PAYOUT_CENTS", 500)  # $5.00
    MAXIMUM_PAYOUT_CENTS = data.get("MAXIMUM_PAYOUT_CENTS", 1000000)  # $10,000.00
    RESTORE_EARNINGS_ON_FAILED_PAYOUT = bool(data.get("RESTORE_EARNINGS_ON_FAILED_PAYOUT", False))
    PAYOUT_RAIL = data.get("PAYOUT_RAIL", "simulated")  # simulated | stripe
    STRIPE_SECRET_KEY = data.get("STRIPE_SECRET_KEY", "")

    # Credit purchases (1 credit = 1 cent)
    MINIMUM_PURCHASE_CENTS = data.get("MINIMUM_PURCHASE_CENTS", 500)
    MAXIMUM_PURCHASE_CENTS = data.get("MAXIMUM_PURCHASE_CENTS", 100000)
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "usd")

    # Ledger reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
    DISCREPANCY_NOTIFICATION_WEBHOOK = data.get("DISCREPANCY_NOTIFICATION_WEBHOOK", None)
