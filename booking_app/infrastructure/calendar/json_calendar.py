from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from booking_app.application.exceptions import StoreUnavailableError
from booking_app.domain.entities.commitment import Commitment
from booking_app.infrastructure.calendar.memory_calendar import MemoryCalendarStore


class JsonCalendarStore(MemoryCalendarStore):
    """Memory store that keeps a copy of every commitment in one JSON file."""

    def __init__(self, data_path: str = "./data/calendar.json") -> None:
        self._file_path = Path(data_path)
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self._load())

    def _load(self) -> list[Commitment]:
        if not self._file_path.exists():
            return []
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return [self._deserialize(item) for item in data.get("commitments", [])]
        except (json.JSONDecodeError, OSError, KeyError, ValueError) as e:
            raise StoreUnavailableError(
                f"Calendar file {self._file_path} could not be read",
                {"path": str(self._file_path), "error": str(e)},
            ) from e

    def _persist(self, commitments: dict[str, Commitment]) -> None:
        """Write all commitments to a temp file, then rename it over the real one."""
        data = {
            "version": 1,
            "commitments": [self._serialize(c) for c in commitments.values()],
        }
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            self._logger.error("Failed to write calendar file", extra={"error": str(e)})
            raise StoreUnavailableError(
                f"Calendar file {self._file_path} could not be written",
                {"path": str(self._file_path), "error": str(e)},
            ) from e

    def _serialize(self, commitment: Commitment) -> dict[str, Any]:
        return {
            "stored_id": commitment.stored_id,
            "title": commitment.title,
            "start": commitment.start.isoformat(),
            "end": commitment.end.isoformat(),
            "metadata": dict(commitment.metadata),
        }

    def _deserialize(self, data: dict[str, Any]) -> Commitment:
        return Commitment(
            stored_id=data["stored_id"],
            title=data.get("title", ""),
            start=datetime.fromisoformat(data["start"]),
            end=datetime.fromisoformat(data["end"]),
            metadata={str(k): str(v) for k, v in (data.get("metadata") or {}).items()},
        )
