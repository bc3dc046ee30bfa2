from __future__ import annotations

import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from booking_app.application.exceptions import InvalidDateError, ValidationError
from booking_app.application.utils.identifiers import APPOINTMENT_ID_PATTERN
from booking_app.application.utils.time_utils import ensure_aware

DATE_FORMAT_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_booking_date(value: str | date | None) -> date:
    """Parse a YYYY-MM-DD string.

    Raises ValidationError when the value is missing or not in that shape, and
    InvalidDateError when it is shaped right but names no real day (2026-02-30).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        raise ValidationError("Date is required", fields=["date"])
    text = str(value).strip()
    if not DATE_FORMAT_PATTERN.match(text):
        raise ValidationError("Date must use the YYYY-MM-DD format", fields=["date"])
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateError(f"{text} is not a valid calendar date", {"date": text}) from e


def parse_instant(value: str | datetime | None, field_name: str, timezone: ZoneInfo) -> datetime:
    """Parse an ISO 8601 timestamp; naive values are read in the business timezone."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required", fields=[field_name])
    if isinstance(value, datetime):
        return ensure_aware(value, timezone)
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"{field_name} must be an ISO 8601 timestamp", fields=[field_name]) from e
    return ensure_aware(parsed, timezone)


def require_fields(**values: object) -> None:
    missing = [name for name, value in values.items() if value is None or not str(value).strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)


def validate_email(email: str) -> str:
    normalized = email.strip()
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationError("Customer email is not a valid address", fields=["customer_email"])
    return normalized


def validate_appointment_id(appointment_id: str | None) -> str:
    normalized = (appointment_id or "").strip().upper()
    if not APPOINTMENT_ID_PATTERN.match(normalized):
        raise ValidationError("Appointment id has an invalid format", fields=["appointment_id"])
    return normalized
