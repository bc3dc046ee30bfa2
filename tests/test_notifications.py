"""
Tests for booking notifications.
"""

from __future__ import annotations

import json

import httpx

from booking_app.application.ports.notifier import NotificationPort
from booking_app.application.use_cases.notify_customer import NotifyCustomerUseCase
from booking_app.domain.entities.reservation import CancellationResult, Reservation, ReservationStatus
from booking_app.infrastructure.notifications.log_notifier import LoggingNotifier
from booking_app.infrastructure.notifications.webhook_notifier import WebhookNotifier

from conftest import NOW, at

RESERVATION = Reservation(
    appointment_id="APT-0000000001-AAAA",
    customer_name="Ana Lopez",
    customer_email="ana@example.com",
    service_id="standard",
    start=at(19, 10),
    end=at(19, 11),
    status=ReservationStatus.CONFIRMED,
    created_at=NOW,
)


class FailingNotifier(NotificationPort):
    def booking_confirmed(self, reservation):
        raise RuntimeError("smtp down")

    def booking_rescheduled(self, reservation):
        raise RuntimeError("smtp down")

    def booking_cancelled(self, cancellation):
        raise RuntimeError("smtp down")


def test_webhook_notifier_posts_event_payload():
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(json.loads(request.content))
        return httpx.Response(202)

    notifier = WebhookNotifier("https://hooks.test/booking", client=httpx.Client(transport=httpx.MockTransport(handler)))
    notifier.booking_confirmed(RESERVATION)
    notifier.booking_cancelled(CancellationResult(RESERVATION.appointment_id, NOW, RESERVATION))

    assert captured[0]["event"] == "booking.confirmed"
    assert captured[0]["data"]["appointment_id"] == RESERVATION.appointment_id
    assert captured[1]["event"] == "booking.cancelled"
    assert captured[1]["data"]["cancelled"] is True


def test_notification_failures_do_not_propagate():
    use_case = NotifyCustomerUseCase(notifier=FailingNotifier())
    assert use_case.confirmed(RESERVATION) is False
    assert use_case.rescheduled(RESERVATION) is False


def test_webhook_error_status_is_reported_as_failure():
    notifier = WebhookNotifier(
        "https://hooks.test/booking",
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500))),
    )
    assert NotifyCustomerUseCase(notifier=notifier).confirmed(RESERVATION) is False


def test_logging_notifier_sends_nothing():
    assert NotifyCustomerUseCase(notifier=LoggingNotifier()).confirmed(RESERVATION) is True
