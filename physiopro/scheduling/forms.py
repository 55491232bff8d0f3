"""Prefilled values for the appointment create/edit form."""

from datetime import date, datetime, time, timedelta

from pydantic import BaseModel

from physiopro.calendar import availability
from physiopro.scheduling.schemas import APPOINTMENT_TYPES, DEFAULT_APPOINTMENT_TYPE, Appointment
from physiopro.scheduling.seed import patient_name

DURATION_OPTIONS = (15, 30, 45, 60, 90)
DEFAULT_DURATION_MINUTES = 30
DEFAULT_START_TIME = time(9, 0)
START_TIME_INCREMENT_MINUTES = 30
TIME_FORMAT = '%H:%M'


class AppointmentForm(BaseModel):
    appointment_id: str | None = None
    patient_id: str | None = None
    date: date
    start_time: str
    duration_minutes: int
    appointment_type: str
    title: str = ''
    suggested_times: list[str] = []

    @property
    def is_edit(self) -> bool:
        return self.appointment_id is not None


class FormOptions(BaseModel):
    appointment_types: list[str]
    durations: list[int]
    start_times: list[str]


def start_time_options() -> list[str]:
    midnight = datetime.combine(date.min, time(0, 0))
    steps = 24 * 60 // START_TIME_INCREMENT_MINUTES
    return [
        (midnight + timedelta(minutes=step * START_TIME_INCREMENT_MINUTES)).strftime(TIME_FORMAT)
        for step in range(steps)
    ]


def form_options() -> FormOptions:
    return FormOptions(
        appointment_types=list(APPOINTMENT_TYPES),
        durations=list(DURATION_OPTIONS),
        start_times=start_time_options(),
    )


def _suggestions(day: date, patient_id: str | None, now: datetime) -> list[str]:
    # Suggestions need both a day and a patient to be meaningful.
    if not patient_id:
        return []
    return [slot.strftime(TIME_FORMAT) for slot in availability.suggested_times(day, now)]


def new_appointment_form(day: date, now: datetime, patient_id: str | None = None) -> AppointmentForm:
    return AppointmentForm(
        patient_id=patient_id,
        date=day,
        start_time=DEFAULT_START_TIME.strftime(TIME_FORMAT),
        duration_minutes=DEFAULT_DURATION_MINUTES,
        appointment_type=DEFAULT_APPOINTMENT_TYPE,
        suggested_times=_suggestions(day, patient_id, now),
    )


def edit_appointment_form(appointment: Appointment, now: datetime) -> AppointmentForm:
    return AppointmentForm(
        appointment_id=appointment.id,
        patient_id=appointment.patient_id,
        date=appointment.day,
        start_time=appointment.start_time.strftime(TIME_FORMAT),
        duration_minutes=appointment.duration_minutes,
        appointment_type=appointment.appointment_type,
        title=appointment.title or '',
        suggested_times=_suggestions(appointment.day, appointment.patient_id, now),
    )


def default_title(appointment_type: str, patient_id: str) -> str:
    return f'{appointment_type} with {patient_name(patient_id)}'
