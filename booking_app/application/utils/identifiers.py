from __future__ import annotations

import re
import secrets
import threading
import time

APPOINTMENT_ID_PREFIX = "APT"
APPOINTMENT_ID_PATTERN = re.compile(r"^APT-[0-9A-Z]{8,14}-[0-9A-F]{4}$")

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


class AppointmentIdGenerator:
    """Builds ids like ``APT-<base36 microseconds>-<4 hex>``.

    The timestamp part never repeats or goes backwards within the process,
    even if the wall clock does; the random suffix separates processes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_micros = 0

    def next_id(self) -> str:
        with self._lock:
            micros = time.time_ns() // 1_000
            if micros <= self._last_micros:
                micros = self._last_micros + 1
            self._last_micros = micros
        return f"{APPOINTMENT_ID_PREFIX}-{_to_base36(micros)}-{secrets.token_hex(2).upper()}"
