"""Appointment domain models shared by the store, gateway and calendar."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from physiopro.core.clock import to_calendar_time

MAX_APPOINTMENT_NOTES_LENGTH = 600
TELEHEALTH_CHECK_IN = 'Telehealth Check-in'
APPOINTMENT_TYPES = (
    'Initial Consultation',
    'Follow-up',
    'Routine Visit',
    TELEHEALTH_CHECK_IN,
)
DEFAULT_APPOINTMENT_TYPE = 'Follow-up'


class AppointmentStatus(str, Enum):
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    PENDING = 'pending'
    RESCHEDULED = 'rescheduled'


# Statuses that still occupy the clinician's time.
ACTIVE_STATUSES = frozenset({
    AppointmentStatus.SCHEDULED,
    AppointmentStatus.PENDING,
    AppointmentStatus.RESCHEDULED,
})


def normalize_appointment_type(value: str) -> str:
    normalized = value.strip().lower()
    for appointment_type in APPOINTMENT_TYPES:
        if appointment_type.lower() == normalized:
            return appointment_type
    raise ValueError('Invalid appointment type.')


def normalize_notes(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_APPOINTMENT_NOTES_LENGTH:
        raise ValueError(f'Notes must be {MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')

    return normalized


class AppointmentDraft(BaseModel):
    """An appointment before the gateway assigns its id and status."""

    model_config = ConfigDict(from_attributes=True)

    patient_id: str
    clinician_id: str
    start_time: datetime
    end_time: datetime
    appointment_type: str = DEFAULT_APPOINTMENT_TYPE
    title: str | None = None
    notes: str | None = None

    @field_validator('patient_id', 'clinician_id')
    @classmethod
    def validate_reference(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Patient and clinician references are required.')
        return normalized

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_wall_clock(cls, value: datetime) -> datetime:
        return to_calendar_time(value).replace(second=0, microsecond=0)

    @field_validator('appointment_type')
    @classmethod
    def validate_appointment_type(cls, value: str) -> str:
        return normalize_appointment_type(value)

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)

    @model_validator(mode='after')
    def validate_interval(self):
        if self.end_time <= self.start_time:
            raise ValueError('Appointment must end after it starts.')
        return self

    @property
    def label(self) -> str:
        return self.title or self.appointment_type

    @property
    def day(self) -> date:
        return self.start_time.date()

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    @property
    def is_telehealth(self) -> bool:
        return self.appointment_type == TELEHEALTH_CHECK_IN

    def overlaps(self, other: 'AppointmentDraft') -> bool:
        return self.start_time < other.end_time and self.end_time > other.start_time


class Appointment(AppointmentDraft):
    id: str
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
