from datetime import datetime
from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from booking_app.core.config import Settings, settings
from booking_app.application.ports.calendar_store import CalendarStorePort
from booking_app.application.ports.notifier import NotificationPort
from booking_app.application.ports.service_catalog import ServiceCatalogPort
from booking_app.application.use_cases.booking import BookingUseCase
from booking_app.application.use_cases.booking_ledger import BookingLedger
from booking_app.application.use_cases.notify_customer import NotifyCustomerUseCase
from booking_app.domain.entities.booking_policy import BookingWindowPolicy
from booking_app.infrastructure.calendar.google_calendar import GoogleCalendarStore
from booking_app.infrastructure.calendar.json_calendar import JsonCalendarStore
from booking_app.infrastructure.calendar.memory_calendar import MemoryCalendarStore
from booking_app.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from booking_app.infrastructure.notifications.log_notifier import LoggingNotifier
from booking_app.infrastructure.notifications.webhook_notifier import WebhookNotifier


logger = logging.getLogger(__name__)


def policy_from_settings(config: Settings) -> BookingWindowPolicy:
    return BookingWindowPolicy(
        business_start_hour=config.BUSINESS_START_HOUR,
        business_end_hour=config.BUSINESS_END_HOUR,
        working_weekdays=frozenset(config.WORKING_WEEKDAYS),
        slot_interval_minutes=config.SLOT_INTERVAL_MINUTES,
        buffer_minutes=config.BOOKING_BUFFER_MINUTES,
        min_notice_hours=config.MIN_NOTICE_HOURS,
        max_advance_days=config.MAX_ADVANCE_DAYS,
        timezone=ZoneInfo(config.BUSINESS_TIMEZONE),
    )


@lru_cache
def get_policy() -> BookingWindowPolicy:
    return policy_from_settings(settings)


@lru_cache
def get_calendar_store() -> CalendarStorePort:
    provider = settings.CALENDAR_PROVIDER.lower()
    if provider == "google":
        logger.info("Using GoogleCalendarStore")
        return GoogleCalendarStore(
            calendar_id=settings.GOOGLE_CALENDAR_ID or "",
            access_token=settings.GOOGLE_CALENDAR_ACCESS_TOKEN or "",
            timezone=get_policy().timezone,
            base_url=settings.GOOGLE_CALENDAR_BASE_URL,
            timeout=settings.CALENDAR_TIMEOUT_SECONDS,
        )
    if provider == "json":
        logger.info("Using JsonCalendarStore path=%s", settings.CALENDAR_DATA_PATH)
        return JsonCalendarStore(data_path=settings.CALENDAR_DATA_PATH)
    if provider != "memory":
        raise ValueError(f"Unknown CALENDAR_PROVIDER {settings.CALENDAR_PROVIDER!r}")
    logger.info("Using MemoryCalendarStore (ENV=%s)", settings.ENV)
    return MemoryCalendarStore()


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    if settings.SERVICE_CATALOG_PATH:
        return ServiceCatalogStore.from_json_file(settings.SERVICE_CATALOG_PATH)
    return ServiceCatalogStore()


@lru_cache
def get_notifier() -> NotificationPort:
    if settings.NOTIFICATION_WEBHOOK_URL:
        return WebhookNotifier(endpoint=settings.NOTIFICATION_WEBHOOK_URL)
    return LoggingNotifier()


@lru_cache
def get_booking_use_case() -> BookingUseCase:
    policy = get_policy()
    ledger = BookingLedger(
        store=get_calendar_store(),
        clock=lambda: datetime.now(policy.timezone),
        search_horizon_days=settings.APPOINTMENT_SEARCH_HORIZON_DAYS,
    )
    return BookingUseCase(
        ledger=ledger,
        catalog=get_service_catalog(),
        policy=policy,
    )


def get_notify_use_case() -> NotifyCustomerUseCase:
    return NotifyCustomerUseCase(notifier=get_notifier())
