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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./eligibility.db")
    DB_ECHO = bool(data.get("DB_ECHO", 0))
    DB_CREATE_TABLES = bool(data.get("DB_CREATE_TABLES", 1))
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", 0))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Payment eligibility windows (days a successful payment keeps a subject active)
    ELIGIBILITY_MONTHLY_VALIDITY_DAYS = data.get("ELIGIBILITY_MONTHLY_VALIDITY_DAYS", 35)
    ELIGIBILITY_YEARLY_VALIDITY_DAYS = data.get("ELIGIBILITY_YEARLY_VALIDITY_DAYS", 370)

    # Event statuses that accept registrations
    REGISTRATION_OPEN_STATUSES = data.get(
        "REGISTRATION_OPEN_STATUSES", ["published", "registration_open"]
    )

    # Discount automation
    ATTENDANCE_MILESTONE_INTERVAL = data.get("ATTENDANCE_MILESTONE_INTERVAL", 5)
    DISCOUNT_CODE_PREFIX = data.get("DISCOUNT_CODE_PREFIX", "AUTO")
    DISCOUNT_CODE_LENGTH = data.get("DISCOUNT_CODE_LENGTH", 8)
    DISCOUNT_NOTIFICATION_WEBHOOK = data.get("DISCOUNT_NOTIFICATION_WEBHOOK", None)

    # Domain event processor worker
    EVENT_PROCESSING_ENABLED = bool(data.get("EVENT_PROCESSING_ENABLED", True))
    EVENT_PROCESSING_BATCH_SIZE = data.get("EVENT_PROCESSING_BATCH_SIZE", 50)
    EVENT_PROCESSING_INTERVAL_SECONDS = data.get("EVENT_PROCESSING_INTERVAL_SECONDS", 30)

    # Birthday event worker
    BIRTHDAY_EVENTS_ENABLED = bool(data.get("BIRTHDAY_EVENTS_ENABLED", True))
    BIRTHDAY_EVENTS_CHECK_INTERVAL_SECONDS = data.get("BIRTHDAY_EVENTS_CHECK_INTERVAL_SECONDS", 3600)  # Runs once per date
