from __future__ import annotations

from typing import Any


class BookingError(Exception):
    """Base for every business error the booking core can raise.

    ``kind`` is a stable tag callers branch on; ``details`` carries a
    structured payload; ``operation`` is stamped by the orchestrator with the
    action that was being performed.
    """

    kind = "booking_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})
        self.operation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
        }
        if self.operation:
            payload["operation"] = self.operation
        return payload


class ValidationError(BookingError):
    """Raised when input is missing or malformed, or a booking rule is violated."""

    kind = "validation"

    def __init__(
        self,
        message: str,
        fields: list[str] | None = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        payload = dict(details or {})
        payload["fields"] = list(fields or [])
        if reason:
            payload["reason"] = reason
        super().__init__(message, payload)

    @property
    def fields(self) -> list[str]:
        return self.details["fields"]

    @property
    def reason(self) -> str | None:
        return self.details.get("reason")


class InvalidDateError(BookingError):
    """Raised when a well-formed date string does not name a real calendar day."""

    kind = "invalid_date"


class NotFoundError(BookingError):
    """Raised when an appointment or service id cannot be resolved."""

    kind = "not_found"

    def __init__(self, message: str, resource: str, identifier: str) -> None:
        super().__init__(message, {"resource": resource, "id": identifier})


class ConflictError(BookingError):
    """Raised when the requested interval is no longer free at commit time."""

    kind = "conflict"


class StoreUnavailableError(BookingError):
    """Raised when the calendar store call itself fails (transport, auth, I/O)."""

    kind = "store_unavailable"
