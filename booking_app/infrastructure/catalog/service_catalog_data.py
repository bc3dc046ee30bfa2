from __future__ import annotations

from booking_app.domain.entities.service import Service

SERVICE_CATALOG: dict[str, Service] = {
    "consultation": Service(
        service_id="consultation",
        name="Initial Consultation",
        duration_minutes=30,
        color_tag="9",
    ),
    "standard": Service(
        service_id="standard",
        name="Standard Appointment",
        duration_minutes=60,
        color_tag="2",
    ),
    "extended": Service(
        service_id="extended",
        name="Extended Session",
        duration_minutes=90,
        color_tag="5",
    ),
    "follow_up": Service(
        service_id="follow_up",
        name="Follow-up Visit",
        duration_minutes=45,
        color_tag="7",
    ),
}
