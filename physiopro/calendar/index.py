"""Per-day lookups over an appointment snapshot."""

from collections import defaultdict
from datetime import date
from typing import Iterable

from physiopro.scheduling.schemas import Appointment, AppointmentStatus

MAX_GRID_BADGES = 3


def appointments_on_day(appointments: Iterable[Appointment], day: date) -> list[Appointment]:
    return [appointment for appointment in appointments if appointment.start_time.date() == day]


class AppointmentIndex:
    """Appointments keyed by the ISO date of their start.

    Build a new index whenever the appointment collection changes.
    """

    def __init__(self, appointments: Iterable[Appointment]):
        self._by_day: dict[str, list[Appointment]] = defaultdict(list)
        for appointment in appointments:
            self._by_day[appointment.start_time.date().isoformat()].append(appointment)

    def __len__(self) -> int:
        return sum(len(day_appointments) for day_appointments in self._by_day.values())

    def on_day(self, day: date) -> list[Appointment]:
        return list(self._by_day.get(day.isoformat(), ()))

    def scheduled_on_day(self, day: date) -> list[Appointment]:
        return [
            appointment
            for appointment in self._by_day.get(day.isoformat(), ())
            if appointment.status == AppointmentStatus.SCHEDULED
        ]

    def day_detail(self, day: date) -> list[Appointment]:
        return sorted(self.on_day(day), key=lambda appointment: appointment.start_time)

    def badges_for(self, day: date, limit: int = MAX_GRID_BADGES) -> tuple[list[Appointment], int]:
        scheduled = self.scheduled_on_day(day)
        return scheduled[:limit], max(0, len(scheduled) - limit)
