from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from booking_app.api.v1.schemas import (
    BookingRequestSchema,
    EnvelopeSchema,
    RescheduleRequestSchema,
    ServiceSchema,
)
from booking_app.application.ports.service_catalog import ServiceCatalogPort
from booking_app.application.use_cases.booking import BookingUseCase
from booking_app.application.use_cases.notify_customer import NotifyCustomerUseCase
from booking_app.domain.entities.reservation import CustomerDetails
from booking_app.wiring.dependencies import (
    get_booking_use_case,
    get_notify_use_case,
    get_service_catalog,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/services", response_model=EnvelopeSchema)
def list_services(catalog: ServiceCatalogPort = Depends(get_service_catalog)):
    services = [
        ServiceSchema(
            id=s.service_id,
            name=s.name,
            duration_minutes=s.duration_minutes,
            color_tag=s.color_tag,
        )
        for s in catalog.list_services()
    ]
    return EnvelopeSchema(success=True, message=f"{len(services)} services available", data=[s.model_dump() for s in services])


@router.get("/slots", response_model=EnvelopeSchema)
def get_slots(
    date: str | None = Query(None),
    service_id: str | None = Query(None),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    slots = uc.get_slots(date, service_id)
    message = f"{len(slots)} slots available" if slots else "No slots available on that date"
    return EnvelopeSchema(
        success=True,
        message=message,
        data={
            "date": date,
            "service_id": service_id,
            "slots": [slot.to_dict() for slot in slots],
        },
    )


@router.get("/slots/next", response_model=EnvelopeSchema)
def next_available_slot(
    service_id: str | None = Query(None),
    from_date: str | None = Query(None),
    days: int | None = Query(None, ge=1),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    slot = uc.find_next_available(service_id, from_date, days)
    if slot is None:
        return EnvelopeSchema(success=True, message="No free slot in the booking window", data=None)
    return EnvelopeSchema(success=True, message="Next available slot found", data=slot.to_dict())


@router.post("/appointments", response_model=EnvelopeSchema, status_code=201)
def book_appointment(
    req: BookingRequestSchema,
    background_tasks: BackgroundTasks,
    uc: BookingUseCase = Depends(get_booking_use_case),
    notify: NotifyCustomerUseCase = Depends(get_notify_use_case),
):
    reservation = uc.book(
        customer=CustomerDetails(
            name=req.customer_name or "",
            email=req.customer_email or "",
            phone=req.customer_phone,
        ),
        start=req.start_time,
        service_id=req.service_id,
        end=req.end_time,
        notes=req.notes,
    )
    background_tasks.add_task(notify.confirmed, reservation)
    return EnvelopeSchema(success=True, message="Appointment booked", data=reservation.to_dict())


@router.get("/appointments/{appointment_id}", response_model=EnvelopeSchema)
def get_appointment(
    appointment_id: str,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    reservation = uc.get_appointment(appointment_id)
    return EnvelopeSchema(success=True, message="Appointment found", data=reservation.to_dict())


@router.post("/appointments/{appointment_id}/cancel", response_model=EnvelopeSchema)
def cancel_appointment(
    appointment_id: str,
    background_tasks: BackgroundTasks,
    uc: BookingUseCase = Depends(get_booking_use_case),
    notify: NotifyCustomerUseCase = Depends(get_notify_use_case),
):
    result = uc.cancel(appointment_id)
    background_tasks.add_task(notify.cancelled, result)
    return EnvelopeSchema(success=True, message="Appointment cancelled", data=result.to_dict())


@router.post("/appointments/{appointment_id}/reschedule", response_model=EnvelopeSchema)
def reschedule_appointment(
    appointment_id: str,
    req: RescheduleRequestSchema,
    background_tasks: BackgroundTasks,
    uc: BookingUseCase = Depends(get_booking_use_case),
    notify: NotifyCustomerUseCase = Depends(get_notify_use_case),
):
    reservation = uc.reschedule(appointment_id, req.new_start_time, req.new_end_time)
    background_tasks.add_task(notify.rescheduled, reservation)
    return EnvelopeSchema(success=True, message="Appointment rescheduled", data=reservation.to_dict())
