from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from booking_app.application.exceptions import ConflictError, NotFoundError
from booking_app.application.ports.calendar_store import CalendarStorePort
from booking_app.application.utils.time_utils import ranges_overlap
from booking_app.domain.entities.commitment import Commitment
from booking_app.domain.entities.reservation import Reservation, ReservationStatus
from booking_app.domain.entities.time_slot import BusyInterval

APPOINTMENT_TAG = "appointmentId"


def reservation_to_metadata(reservation: Reservation) -> dict[str, str]:
    metadata = {
        APPOINTMENT_TAG: reservation.appointment_id,
        "serviceId": reservation.service_id,
        "customerName": reservation.customer_name,
        "customerEmail": reservation.customer_email,
        "status": reservation.status.value,
        "bookedAt": reservation.created_at.isoformat(),
    }
    if reservation.customer_phone:
        metadata["customerPhone"] = reservation.customer_phone
    if reservation.notes:
        metadata["notes"] = reservation.notes
    if reservation.rescheduled_at:
        metadata["rescheduledAt"] = reservation.rescheduled_at.isoformat()
    return metadata


def reservation_from_commitment(commitment: Commitment) -> Reservation:
    """Rebuild a reservation from the store; times come from the commitment itself."""
    metadata = commitment.metadata
    rescheduled_at = metadata.get("rescheduledAt")
    booked_at = metadata.get("bookedAt")
    return Reservation(
        appointment_id=metadata[APPOINTMENT_TAG],
        customer_name=metadata.get("customerName", ""),
        customer_email=metadata.get("customerEmail", ""),
        customer_phone=metadata.get("customerPhone"),
        service_id=metadata.get("serviceId", ""),
        start=commitment.start,
        end=commitment.end,
        notes=metadata.get("notes"),
        status=ReservationStatus(metadata.get("status", ReservationStatus.CONFIRMED.value)),
        created_at=datetime.fromisoformat(booked_at) if booked_at else commitment.start,
        rescheduled_at=datetime.fromisoformat(rescheduled_at) if rescheduled_at else None,
    )


class BookingLedger:
    """Reads and writes reservations on the shared calendar store.

    Every reservation is a commitment tagged with its appointment id, so it can
    be found again by that id alone. Writes re-check the live store for overlaps
    right before mutating; stores with an atomic check-and-write get it done in
    one call. ``padding_minutes`` widens the other commitments on both ends, so
    the buffer between appointments holds at commit time too.
    """

    def __init__(
        self,
        store: CalendarStorePort,
        clock: Callable[[], datetime],
        search_horizon_days: int = 365,
    ) -> None:
        self._store = store
        self._clock = clock
        self._search_horizon = timedelta(days=search_horizon_days)
        self._logger = logging.getLogger(__name__)

    def list_busy_intervals(self, start: datetime, end: datetime) -> list[BusyInterval]:
        return self._store.list_busy_intervals(start, end)

    def conflicting_intervals(
        self,
        start: datetime,
        end: datetime,
        exclude_stored_id: str | None = None,
        padding_minutes: int = 0,
    ) -> list[BusyInterval]:
        """Busy intervals that overlap [start, end) once widened by ``padding_minutes``."""
        pad = timedelta(minutes=padding_minutes)
        return [
            interval
            for interval in self._store.list_busy_intervals(start - pad, end + pad)
            if ranges_overlap(start, end, interval.start - pad, interval.end + pad)
            and (exclude_stored_id is None or interval.stored_id != exclude_stored_id)
        ]

    def create(
        self,
        reservation: Reservation,
        title: str | None = None,
        padding_minutes: int = 0,
    ) -> Reservation:
        title = title or f"Appointment: {reservation.customer_name}"
        metadata = reservation_to_metadata(reservation)

        if self._store.supports_conditional_write:
            stored_id = self._store.create_commitment_if_free(
                title, reservation.start, reservation.end, metadata, padding_minutes=padding_minutes
            )
            if stored_id is None:
                raise self._conflict(reservation.start, reservation.end)
        else:
            # Without an atomic store write a second writer can still slip in
            # between this check and create_commitment.
            if self.conflicting_intervals(reservation.start, reservation.end, padding_minutes=padding_minutes):
                raise self._conflict(reservation.start, reservation.end)
            stored_id = self._store.create_commitment(title, reservation.start, reservation.end, metadata)

        self._logger.info(
            "Reservation stored",
            extra={"appointment_id": reservation.appointment_id, "stored_id": stored_id},
        )
        return reservation

    def find_by_id(self, appointment_id: str) -> Reservation | None:
        commitment = self._find_commitment(appointment_id)
        if commitment is None:
            return None
        return reservation_from_commitment(commitment)

    def cancel(self, appointment_id: str) -> Reservation:
        commitment = self._find_commitment(appointment_id)
        if commitment is None:
            raise self._not_found(appointment_id)
        self._store.delete_commitment(commitment.stored_id)
        self._logger.info(
            "Reservation removed",
            extra={"appointment_id": appointment_id, "stored_id": commitment.stored_id},
        )
        return reservation_from_commitment(commitment)

    def reschedule(
        self,
        appointment_id: str,
        new_start: datetime,
        new_end: datetime,
        rescheduled_at: datetime | None = None,
        padding_minutes: int = 0,
    ) -> Reservation:
        commitment = self._find_commitment(appointment_id)
        if commitment is None:
            raise self._not_found(appointment_id)

        current = reservation_from_commitment(commitment)
        moved = current.moved_to(new_start, new_end, rescheduled_at or self._clock())
        metadata = {
            "status": moved.status.value,
            "rescheduledAt": moved.rescheduled_at.isoformat(),
        }

        if self._store.supports_conditional_write:
            if not self._store.update_commitment_time_if_free(
                commitment.stored_id, new_start, new_end, metadata, padding_minutes=padding_minutes
            ):
                raise self._conflict(new_start, new_end)
        else:
            if self.conflicting_intervals(
                new_start, new_end, exclude_stored_id=commitment.stored_id, padding_minutes=padding_minutes
            ):
                raise self._conflict(new_start, new_end)
            self._store.update_commitment_time(commitment.stored_id, new_start, new_end, metadata)

        self._logger.info(
            "Reservation moved",
            extra={"appointment_id": appointment_id, "stored_id": commitment.stored_id},
        )
        return moved

    def _find_commitment(self, appointment_id: str) -> Commitment | None:
        now = self._clock()
        # Look back one day so appointments already under way are still found.
        matches = self._store.find_commitments_by_tag(
            APPOINTMENT_TAG,
            appointment_id,
            now - timedelta(days=1),
            now + self._search_horizon,
        )
        for commitment in matches:
            if commitment.metadata.get(APPOINTMENT_TAG) == appointment_id:
                return commitment
        return None

    def _conflict(self, start: datetime, end: datetime) -> ConflictError:
        return ConflictError(
            "The requested time is no longer available",
            {"start": start.isoformat(), "end": end.isoformat()},
        )

    def _not_found(self, appointment_id: str) -> NotFoundError:
        return NotFoundError(
            f"No appointment found with id {appointment_id}",
            resource="appointment",
            identifier=appointment_id,
        )
