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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./points.db")
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

    # Commission split applied when escrow is released
    COMMISSION_RATE = data.get("COMMISSION_RATE", "0.05")
    MIN_COMMISSION = data.get("MIN_COMMISSION", "0.01")
    CASHBACK_SHARE = data.get("CASHBACK_SHARE", "0")  # Fraction of commission returned to client as bonus
    PLATFORM_ACCOUNT_ID = data.get("PLATFORM_ACCOUNT_ID", "platform-system-user")

    # Escrow and bonus timing
    ESCROW_AUTO_CONFIRM_DAYS = data.get("ESCROW_AUTO_CONFIRM_DAYS", 7)
    BONUS_EXPIRY_DAYS = data.get("BONUS_EXPIRY_DAYS", 7)
    REGISTRATION_BONUS = data.get("REGISTRATION_BONUS", "50")

    # Notifications (fire-and-forget after state transitions)
    NOTIFICATION_WEBHOOK = data.get("NOTIFICATION_WEBHOOK", None)

    # Shared secret for the externally scheduled auto-release trigger
    CRON_SECRET = data.get("CRON_SECRET", "")

    # Auto-release sweep
    AUTO_RELEASE_ENABLED = bool(data.get("AUTO_RELEASE_ENABLED", True))
    AUTO_RELEASE_INTERVAL_SECONDS = data.get("AUTO_RELEASE_INTERVAL_SECONDS", 3600)

    # Bonus expiry sweep
    BONUS_EXPIRY_ENABLED = bool(data.get("BONUS_EXPIRY_ENABLED", True))
    BONUS_EXPIRY_INTERVAL_SECONDS = data.get("BONUS_EXPIRY_INTERVAL_SECONDS", 3600)

    # Balance audit
    AUDIT_ENABLED = bool(data.get("AUDIT_ENABLED", True))
    AUDIT_TOLERANCE = data.get("AUDIT_TOLERANCE", "0.01")
    AUDIT_INTERVAL_SECONDS = data.get("AUDIT_INTERVAL_SECONDS", 86400)  # Daily
