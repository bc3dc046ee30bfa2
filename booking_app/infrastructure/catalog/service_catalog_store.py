from __future__ import annotations

import json
from pathlib import Path

from booking_app.application.ports.service_catalog import ServiceCatalogPort
from booking_app.domain.entities.service import Service
from booking_app.infrastructure.catalog.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, Service] | None = None) -> None:
        self._catalog = catalog if catalog is not None else SERVICE_CATALOG

    @classmethod
    def from_json_file(cls, path: str | Path) -> ServiceCatalogStore:
        """Load a catalog from a JSON list of {id, name, duration_minutes, color_tag?}."""
        with open(path, "r", encoding="utf-8") as f:
            items = json.load(f)
        catalog: dict[str, Service] = {}
        for item in items:
            service = Service(
                service_id=_normalize(item["id"]),
                name=item["name"],
                duration_minutes=int(item["duration_minutes"]),
                color_tag=item.get("color_tag"),
            )
            if service.service_id in catalog:
                raise ValueError(f"Duplicate service id {service.service_id!r} in {path}")
            catalog[service.service_id] = service
        return cls(catalog)

    def get_service(self, service_id: str) -> Service | None:
        return self._catalog.get(_normalize(service_id))

    def list_services(self) -> list[Service]:
        return list(self._catalog.values())


def _normalize(service_id: str) -> str:
    return service_id.lower().strip()
