"""Month navigation and day selection for a clinician's calendar."""

from datetime import date, datetime
from threading import Lock

from pydantic import BaseModel

from physiopro.calendar.grid import month_start, same_month, shift_month
from physiopro.core.clock import local_now, local_today
from physiopro.scheduling.forms import AppointmentForm, edit_appointment_form, new_appointment_form
from physiopro.scheduling.schemas import Appointment


class CalendarState(BaseModel):
    viewing_month: date
    selected_date: date | None


class CalendarSession:
    """Tracks the viewed month and the selected day.

    The month view and the mini day picker share this state, so selecting a
    day outside the viewed month moves the view to that day's month.
    """

    def __init__(self, today: date | None = None):
        today = today or local_today()
        self.viewing_month = month_start(today)
        self.selected_date: date | None = today

    @property
    def state(self) -> CalendarState:
        return CalendarState(viewing_month=self.viewing_month, selected_date=self.selected_date)

    def navigate_month(self, delta: int) -> CalendarState:
        if delta not in (1, -1):
            raise ValueError('Month navigation moves one month at a time.')
        self.viewing_month = shift_month(self.viewing_month, delta)
        return self.state

    def jump_to_today(self, today: date | None = None) -> CalendarState:
        today = today or local_today()
        self.viewing_month = month_start(today)
        self.selected_date = today
        return self.state

    def select_day(self, day: date) -> CalendarState:
        self.selected_date = day
        if not same_month(day, self.viewing_month):
            self.viewing_month = month_start(day)
        return self.state

    def request_new_appointment(
        self,
        day: date | None = None,
        now: datetime | None = None,
        patient_id: str | None = None,
    ) -> AppointmentForm:
        now = now or local_now()
        prefill_day = day or self.selected_date or now.date()
        return new_appointment_form(prefill_day, now, patient_id=patient_id)

    def request_edit_appointment(self, appointment: Appointment, now: datetime | None = None) -> AppointmentForm:
        return edit_appointment_form(appointment, now or local_now())


class CalendarSessionRegistry:
    def __init__(self):
        self._sessions: dict[str, CalendarSession] = {}
        self._lock = Lock()

    def get(self, clinician_id: str, today: date | None = None) -> CalendarSession:
        with self._lock:
            session = self._sessions.get(clinician_id)
            if session is None:
                session = CalendarSession(today)
                self._sessions[clinician_id] = session
            return session

    def reset(self) -> None:
        with self._lock:
            self._sessions.clear()
