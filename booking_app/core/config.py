from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Appointment Booking API"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    BUSINESS_START_HOUR: int = 9
    BUSINESS_END_HOUR: int = 17
    WORKING_WEEKDAYS: list[int] = [0, 1, 2, 3, 4]  # Monday=0
    SLOT_INTERVAL_MINUTES: int = 30
    BOOKING_BUFFER_MINUTES: int = 15
    MIN_NOTICE_HOURS: int = 2
    MAX_ADVANCE_DAYS: int = 60
    APPOINTMENT_SEARCH_HORIZON_DAYS: int = 365

    CALENDAR_PROVIDER: str = "memory"  # "memory", "json", "google"
    CALENDAR_DATA_PATH: str = "./data/calendar.json"
    CALENDAR_TIMEOUT_SECONDS: float = 10.0
    GOOGLE_CALENDAR_ID: str | None = None
    GOOGLE_CALENDAR_ACCESS_TOKEN: str | None = None
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"

    SERVICE_CATALOG_PATH: str | None = None
    NOTIFICATION_WEBHOOK_URL: str | None = None


settings = Settings()
