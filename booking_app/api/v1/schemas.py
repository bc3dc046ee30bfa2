from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ErrorSchema(BaseModel):
    kind: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    operation: str | None = None


class EnvelopeSchema(BaseModel):
    success: bool
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    message: str
    data: Any | None = None
    error: ErrorSchema | None = None


class ServiceSchema(BaseModel):
    id: str
    name: str
    duration_minutes: int
    color_tag: str | None = None


class BookingRequestSchema(BaseModel):
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    service_id: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    notes: str | None = Field(default=None, max_length=2000)


class RescheduleRequestSchema(BaseModel):
    new_start_time: str | None = None
    new_end_time: str | None = None
