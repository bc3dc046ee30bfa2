from __future__ import annotations

import logging
from typing import Any

import httpx

from booking_app.application.ports.notifier import NotificationPort
from booking_app.domain.entities.reservation import CancellationResult, Reservation


class WebhookNotifier(NotificationPort):
    """Posts booking events as JSON to an outbound webhook that renders and sends the message."""

    def __init__(self, endpoint: str, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self._endpoint = endpoint
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def booking_confirmed(self, reservation: Reservation) -> None:
        self._post("booking.confirmed", reservation.to_dict())

    def booking_rescheduled(self, reservation: Reservation) -> None:
        self._post("booking.rescheduled", reservation.to_dict())

    def booking_cancelled(self, cancellation: CancellationResult) -> None:
        self._post("booking.cancelled", cancellation.to_dict())

    def _post(self, event: str, data: dict[str, Any]) -> None:
        resp = self._client.post(self._endpoint, json={"event": event, "data": data})
        if resp.status_code >= 400:
            self._logger.error(
                "Notification webhook failed",
                extra={
                    "status": resp.status_code,
                    "event": event,
                    "appointment_id": data.get("appointment_id"),
                    "response": resp.text[:200],
                },
            )
            resp.raise_for_status()
