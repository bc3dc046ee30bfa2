from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timedelta

from booking_app.application.exceptions import BookingError, ConflictError, NotFoundError, ValidationError
from booking_app.application.ports.service_catalog import ServiceCatalogPort
from booking_app.application.use_cases.availability_filter import filter_available, overlaps_any, pad_busy_intervals
from booking_app.application.use_cases.booking_ledger import BookingLedger
from booking_app.application.use_cases.slot_generator import fits_business_hours, generate_candidate_slots
from booking_app.application.utils.identifiers import AppointmentIdGenerator
from booking_app.application.utils.time_utils import (
    add_minutes,
    day_bounds,
    is_in_future,
    meets_min_notice,
    within_booking_window,
)
from booking_app.application.utils.validators import (
    parse_booking_date,
    parse_instant,
    require_fields,
    validate_appointment_id,
    validate_email,
)
from booking_app.domain.entities.booking_policy import BookingWindowPolicy
from booking_app.domain.entities.reservation import (
    CancellationResult,
    CustomerDetails,
    Reservation,
    ReservationStatus,
)
from booking_app.domain.entities.service import Service
from booking_app.domain.entities.time_slot import TimeSlot


class BookingUseCase:
    """Get slots, book, cancel and reschedule against the shared calendar.

    Holds no state between calls beyond the ledger. Slot listings are advisory;
    every committing call re-checks the live store before writing.
    """

    def __init__(
        self,
        ledger: BookingLedger,
        catalog: ServiceCatalogPort,
        policy: BookingWindowPolicy,
        clock: Callable[[], datetime] | None = None,
        id_generator: AppointmentIdGenerator | None = None,
    ) -> None:
        self._ledger = ledger
        self._catalog = catalog
        self._policy = policy
        self._clock = clock or (lambda: datetime.now(policy.timezone))
        self._ids = id_generator or AppointmentIdGenerator()
        self._logger = logging.getLogger(__name__)

    @property
    def policy(self) -> BookingWindowPolicy:
        return self._policy

    def get_slots(self, day: str | date, service_id: str | None) -> list[TimeSlot]:
        with self._operation("get_slots"):
            require_fields(service_id=service_id)
            target_day = parse_booking_date(day)
            service = self._resolve_service(service_id)
            return self._available_slots(target_day, service)

    def find_next_available(
        self,
        service_id: str | None,
        from_day: str | date | None = None,
        days: int | None = None,
    ) -> TimeSlot | None:
        with self._operation("find_next_available"):
            require_fields(service_id=service_id)
            service = self._resolve_service(service_id)
            today = self._clock().astimezone(self._policy.timezone).date()
            start_day = parse_booking_date(from_day) if from_day is not None else today
            start_day = max(start_day, today)
            last_day = today + timedelta(days=self._policy.max_advance_days)
            if days is not None:
                last_day = min(last_day, start_day + timedelta(days=days - 1))

            current = start_day
            while current <= last_day:
                slots = self._available_slots(current, service)
                if slots:
                    return slots[0]
                current += timedelta(days=1)
            return None

    def book(
        self,
        customer: CustomerDetails,
        start: str | datetime | None,
        service_id: str | None,
        end: str | datetime | None = None,
        notes: str | None = None,
    ) -> Reservation:
        with self._operation("book"):
            require_fields(
                customer_name=customer.name,
                customer_email=customer.email,
                service_id=service_id,
                start_time=start,
            )
            email = validate_email(customer.email)
            tz = self._policy.timezone
            start_at = parse_instant(start, "start_time", tz)
            service = self._resolve_service(service_id)

            expected_end = add_minutes(start_at, service.duration_minutes)
            end_at = parse_instant(end, "end_time", tz) if end is not None else expected_end
            if end_at != expected_end:
                raise ValidationError(
                    f"{service.name} lasts {service.duration_minutes} minutes",
                    fields=["end_time"],
                    reason="duration_mismatch",
                )

            slot = TimeSlot(start=start_at, end=end_at)
            now = self._clock()
            self._check_booking_rules(slot, now)
            self._check_slot_free(slot)

            reservation = Reservation(
                appointment_id=self._ids.next_id(),
                customer_name=customer.name.strip(),
                customer_email=email,
                customer_phone=(customer.phone or "").strip() or None,
                service_id=service.service_id,
                start=slot.start,
                end=slot.end,
                notes=(notes or "").strip() or None,
                status=ReservationStatus.CONFIRMED,
                created_at=now,
            )
            stored = self._ledger.create(
                reservation,
                title=f"{service.name} - {reservation.customer_name}",
                padding_minutes=self._policy.buffer_minutes,
            )
            self._logger.info(
                "Appointment booked",
                extra={
                    "operation": "book",
                    "appointment_id": stored.appointment_id,
                    "service_id": stored.service_id,
                },
            )
            return stored

    def get_appointment(self, appointment_id: str | None) -> Reservation:
        with self._operation("get_appointment"):
            normalized = validate_appointment_id(appointment_id)
            reservation = self._ledger.find_by_id(normalized)
            if reservation is None:
                raise _appointment_not_found(normalized)
            return reservation

    def cancel(self, appointment_id: str | None) -> CancellationResult:
        with self._operation("cancel"):
            normalized = validate_appointment_id(appointment_id)
            if self._ledger.find_by_id(normalized) is None:
                raise _appointment_not_found(normalized)
            removed = self._ledger.cancel(normalized)
            cancelled_at = self._clock()
            self._logger.info(
                "Appointment cancelled",
                extra={"operation": "cancel", "appointment_id": normalized},
            )
            return CancellationResult(
                appointment_id=normalized,
                cancelled_at=cancelled_at,
                reservation=replace(removed, status=ReservationStatus.CANCELLED),
            )

    def reschedule(
        self,
        appointment_id: str | None,
        new_start: str | datetime | None,
        new_end: str | datetime | None = None,
    ) -> Reservation:
        with self._operation("reschedule"):
            normalized = validate_appointment_id(appointment_id)
            tz = self._policy.timezone
            start_at = parse_instant(new_start, "new_start_time", tz)
            now = self._clock()
            if not is_in_future(start_at, now):
                raise ValidationError(
                    "The new start time must be in the future",
                    fields=["new_start_time"],
                    reason="not_in_future",
                )

            if new_end is not None:
                end_at = parse_instant(new_end, "new_end_time", tz)
            else:
                current = self._ledger.find_by_id(normalized)
                if current is None:
                    raise _appointment_not_found(normalized)
                end_at = start_at + (current.end - current.start)
            if end_at <= start_at:
                raise ValidationError(
                    "The new end time must be after the new start time",
                    fields=["new_end_time"],
                )

            if not fits_business_hours(TimeSlot(start=start_at, end=end_at), self._policy):
                raise ValidationError(
                    "The new time is outside business hours",
                    fields=["new_start_time"],
                    reason="outside_business_hours",
                )

            moved = self._ledger.reschedule(
                normalized,
                start_at,
                end_at,
                rescheduled_at=now,
                padding_minutes=self._policy.buffer_minutes,
            )
            self._logger.info(
                "Appointment rescheduled",
                extra={"operation": "reschedule", "appointment_id": normalized},
            )
            return moved

    def _available_slots(self, day: date, service: Service) -> list[TimeSlot]:
        now = self._clock()
        today = now.astimezone(self._policy.timezone).date()
        if day < today or day > today + timedelta(days=self._policy.max_advance_days):
            return []
        candidates = generate_candidate_slots(day, service, self._policy)
        if not candidates:
            return []
        day_start, day_end = day_bounds(day, self._policy.timezone)
        busy = self._ledger.list_busy_intervals(day_start, day_end)
        slots = filter_available(candidates, busy, now, self._policy)
        self._logger.debug(
            "Slots computed",
            extra={"service_id": service.service_id, "slot_count": len(slots)},
        )
        return slots

    def _resolve_service(self, service_id: str | None) -> Service:
        service = self._catalog.get_service(service_id or "")
        if service is None:
            raise NotFoundError(
                f"Unknown service {service_id}",
                resource="service",
                identifier=str(service_id),
            )
        return service

    def _check_booking_rules(self, slot: TimeSlot, now: datetime) -> None:
        if not meets_min_notice(slot.start, now, self._policy.min_notice_hours):
            raise ValidationError(
                f"Appointments need at least {self._policy.min_notice_hours} hours notice",
                fields=["start_time"],
                reason="min_notice",
            )
        if not within_booking_window(slot.start, now, self._policy.max_advance_days):
            raise ValidationError(
                f"Appointments can be booked at most {self._policy.max_advance_days} days ahead",
                fields=["start_time"],
                reason="booking_window",
            )
        if not fits_business_hours(slot, self._policy):
            raise ValidationError(
                "The requested time is outside business hours",
                fields=["start_time"],
                reason="outside_business_hours",
            )

    def _check_slot_free(self, slot: TimeSlot) -> None:
        buffer = timedelta(minutes=self._policy.buffer_minutes)
        busy = self._ledger.list_busy_intervals(slot.start - buffer, slot.end + buffer)
        if overlaps_any(slot, pad_busy_intervals(busy, self._policy.buffer_minutes)):
            raise ConflictError(
                "The requested time is no longer available",
                {"start": slot.start.isoformat(), "end": slot.end.isoformat()},
            )

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            yield
        except BookingError as e:
            e.operation = name
            self._logger.warning(
                e.message,
                extra={"operation": name, "error_kind": e.kind},
            )
            raise


def _appointment_not_found(appointment_id: str) -> NotFoundError:
    return NotFoundError(
        f"No appointment found with id {appointment_id}",
        resource="appointment",
        identifier=appointment_id,
    )
