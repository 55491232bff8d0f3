from datetime import datetime, timedelta
from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError

from physiopro.core import config
from physiopro.core.clock import local_now
from physiopro.routes.dependencies import database_unavailable, get_gateway, scheduling_http_error
from physiopro.scheduling.errors import SchedulingError
from physiopro.scheduling.forms import DURATION_OPTIONS, default_title
from physiopro.scheduling.gateway import AppointmentGateway
from physiopro.scheduling.schemas import (
    Appointment,
    AppointmentDraft,
    AppointmentStatus,
    DEFAULT_APPOINTMENT_TYPE,
    normalize_appointment_type,
    normalize_notes,
)

router = APIRouter(tags=['appointments'])


class AppointmentRequest(BaseModel):
    patient_id: str
    clinician_id: str | None = None
    start_time: datetime
    duration_minutes: int = 30
    appointment_type: str = DEFAULT_APPOINTMENT_TYPE
    title: str | None = None
    notes: str | None = None

    @field_validator('patient_id')
    @classmethod
    def validate_patient_id(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Patient is required.')
        return normalized

    @field_validator('clinician_id')
    @classmethod
    def validate_clinician_id(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator('duration_minutes')
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value not in DURATION_OPTIONS:
            raise ValueError(f'Duration must be one of {", ".join(str(option) for option in DURATION_OPTIONS)} minutes.')
        return value

    @field_validator('appointment_type')
    @classmethod
    def validate_appointment_type(cls, value: str) -> str:
        return normalize_appointment_type(value)

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)

    def to_draft(self) -> AppointmentDraft:
        start_time = self.start_time
        return AppointmentDraft(
            patient_id=self.patient_id,
            clinician_id=self.clinician_id or config.DEFAULT_CLINICIAN_ID,
            start_time=start_time,
            end_time=start_time + timedelta(minutes=self.duration_minutes),
            appointment_type=self.appointment_type,
            title=(self.title or '').strip() or default_title(self.appointment_type, self.patient_id),
            notes=self.notes,
        )


class UpdateAppointmentRequest(AppointmentRequest):
    status: AppointmentStatus | None = None


class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    clinician_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    status: str
    appointment_type: str
    title: str | None = None
    notes: str | None = None
    label: str


class PatientAppointmentsView(str, Enum):
    UPCOMING = 'upcoming'
    PAST = 'past'


def to_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        patient_id=appointment.patient_id,
        clinician_id=appointment.clinician_id,
        start_time=appointment.start_time,
        end_time=appointment.end_time,
        duration_minutes=appointment.duration_minutes,
        status=appointment.status.value,
        appointment_type=appointment.appointment_type,
        title=appointment.title,
        notes=appointment.notes,
        label=appointment.label,
    )


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: AppointmentRequest, gateway: AppointmentGateway = Depends(get_gateway)):
    try:
        return to_response(gateway.create(data.to_draft()))
    except SchedulingError as exc:
        raise scheduling_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.put('/{appointment_id}', response_model=AppointmentResponse)
def update_appointment(
    appointment_id: str,
    data: UpdateAppointmentRequest,
    gateway: AppointmentGateway = Depends(get_gateway),
):
    try:
        draft = data.to_draft()
        appointment_status = data.status or gateway.get(appointment_id).status
        appointment = Appointment(**draft.model_dump(), id=appointment_id, status=appointment_status)
        return to_response(gateway.update(appointment))
    except SchedulingError as exc:
        raise scheduling_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_appointment(appointment_id: str, gateway: AppointmentGateway = Depends(get_gateway)):
    try:
        return to_response(gateway.cancel(appointment_id))
    except SchedulingError as exc:
        raise scheduling_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/patients/{patient_id}', response_model=list[AppointmentResponse])
def list_patient_appointments(
    patient_id: str,
    view: PatientAppointmentsView = Query(default=PatientAppointmentsView.UPCOMING),
    gateway: AppointmentGateway = Depends(get_gateway),
):
    normalized_patient_id = patient_id.strip()
    if not normalized_patient_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Patient is required.',
        )

    try:
        now = local_now()
        if view == PatientAppointmentsView.UPCOMING:
            appointments = gateway.upcoming_for_patient(normalized_patient_id, now)
        else:
            appointments = gateway.past_for_patient(normalized_patient_id, now)
        return [to_response(appointment) for appointment in appointments]
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: str, gateway: AppointmentGateway = Depends(get_gateway)):
    try:
        return to_response(gateway.get(appointment_id))
    except SchedulingError as exc:
        raise scheduling_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
