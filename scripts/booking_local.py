#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/booking_local.py

Runs the booking use case against whatever calendar store the settings select
(in-memory by default) and prints results or error kinds.
"""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booking_app.application.exceptions import BookingError  # noqa: E402
from booking_app.domain.entities.reservation import CustomerDetails  # noqa: E402
from booking_app.wiring.dependencies import get_booking_use_case, get_service_catalog  # noqa: E402

HELP = """Commands:
  services
  slots <YYYY-MM-DD> <service_id>
  next <service_id>
  book <service_id> <start ISO> <name> <email>
  show <appointment_id>
  cancel <appointment_id>
  reschedule <appointment_id> <new start ISO>
  /help, /quit"""


def _print_header() -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print(HELP)
    print("-" * 60)


def _run(command: str, args: list[str]) -> None:
    use_case = get_booking_use_case()
    if command == "services":
        for service in get_service_catalog().list_services():
            print(f"  {service.service_id:<14} {service.duration_minutes:>3} min  {service.name}")
    elif command == "slots" and len(args) == 2:
        slots = use_case.get_slots(args[0], args[1])
        print(f"{len(slots)} slots")
        for slot in slots:
            print(f"  {slot.start:%H:%M} - {slot.end:%H:%M}")
    elif command == "next" and len(args) == 1:
        slot = use_case.find_next_available(args[0])
        print(f"next: {slot.start.isoformat()}" if slot else "no free slot in the booking window")
    elif command == "book" and len(args) == 4:
        reservation = use_case.book(CustomerDetails(name=args[2], email=args[3]), args[1], args[0])
        print(f"booked {reservation.appointment_id} {reservation.start.isoformat()}")
    elif command == "show" and len(args) == 1:
        print(use_case.get_appointment(args[0]).to_dict())
    elif command == "cancel" and len(args) == 1:
        result = use_case.cancel(args[0])
        print(f"cancelled {result.appointment_id} at {result.cancelled_at.isoformat()}")
    elif command == "reschedule" and len(args) == 2:
        reservation = use_case.reschedule(args[0], args[1])
        print(f"moved {reservation.appointment_id} to {reservation.start.isoformat()}")
    else:
        print(HELP)


def main() -> int:
    _print_header()
    while True:
        try:
            line = input("booking> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line:
            continue
        if line in {"/quit", "/exit"}:
            return 0
        if line == "/help":
            print(HELP)
            continue
        command, *args = shlex.split(line)
        try:
            _run(command, args)
        except BookingError as e:
            print(f"[{e.kind}] {e.message} {e.details}")


if __name__ == "__main__":
    raise SystemExit(main())
