from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError

from physiopro.calendar.availability import SuggestedSlots, simulated_suggested_dates, suggested_times
from physiopro.calendar.grid import month_start
from physiopro.calendar.navigation import CalendarSessionRegistry, CalendarState
from physiopro.calendar.view import DayDetail, MonthView, build_day_detail, build_month_view
from physiopro.core import config
from physiopro.core.clock import local_now, local_today
from physiopro.routes.dependencies import (
    database_unavailable,
    get_gateway,
    get_session_registry,
    scheduling_http_error,
)
from physiopro.scheduling.errors import SchedulingError
from physiopro.scheduling.forms import AppointmentForm, FormOptions, TIME_FORMAT, form_options
from physiopro.scheduling.gateway import AppointmentGateway

router = APIRouter(tags=['calendar'])


class NavigateMonthRequest(BaseModel):
    delta: int


class SelectDayRequest(BaseModel):
    date: date


class NewAppointmentRequest(BaseModel):
    day: date | None = None
    patient_id: str | None = None

    @field_validator('patient_id')
    @classmethod
    def validate_patient_id(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class SuggestedTimesResponse(BaseModel):
    date: date
    times: list[str]


def parse_month(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value.strip(), '%Y-%m').date()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Month must be formatted as YYYY-MM.',
        ) from exc


def get_suggested_slots() -> SuggestedSlots:
    return SuggestedSlots(simulated_suggested_dates(local_today()))


def resolve_clinician(clinician_id: str | None) -> str:
    return (clinician_id or '').strip() or config.DEFAULT_CLINICIAN_ID


@router.get('/month', response_model=MonthView)
def get_month_view(
    month: str | None = Query(default=None),
    selected: date | None = Query(default=None),
    clinician_id: str | None = Query(default=None),
    gateway: AppointmentGateway = Depends(get_gateway),
    registry: CalendarSessionRegistry = Depends(get_session_registry),
    suggested: SuggestedSlots = Depends(get_suggested_slots),
):
    clinician = resolve_clinician(clinician_id)
    state = registry.get(clinician).state
    selected_date = selected or state.selected_date
    viewing_month = parse_month(month) or (month_start(selected) if selected else state.viewing_month)

    try:
        appointments = gateway.store.list(clinician_id=clinician)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    return build_month_view(
        appointments,
        month_start(viewing_month),
        today=local_today(),
        selected_date=selected_date,
        suggested=suggested,
    )


@router.get('/days/{day}', response_model=DayDetail)
def get_day_detail(
    day: date,
    clinician_id: str | None = Query(default=None),
    gateway: AppointmentGateway = Depends(get_gateway),
):
    try:
        appointments = gateway.store.list(clinician_id=resolve_clinician(clinician_id))
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    return build_day_detail(appointments, day)


@router.get('/session', response_model=CalendarState)
def get_session_state(
    clinician_id: str | None = Query(default=None),
    registry: CalendarSessionRegistry = Depends(get_session_registry),
):
    return registry.get(resolve_clinician(clinician_id)).state


@router.post('/session/navigate', response_model=CalendarState)
def navigate_month(
    data: NavigateMonthRequest,
    clinician_id: str | None = Query(default=None),
    registry: CalendarSessionRegistry = Depends(get_session_registry),
):
    session = registry.get(resolve_clinician(clinician_id))
    try:
        return session.navigate_month(data.delta)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.post('/session/today', response_model=CalendarState)
def jump_to_today(
    clinician_id: str | None = Query(default=None),
    registry: CalendarSessionRegistry = Depends(get_session_registry),
):
    return registry.get(resolve_clinician(clinician_id)).jump_to_today(local_today())


@router.post('/session/select', response_model=CalendarState)
def select_day(
    data: SelectDayRequest,
    clinician_id: str | None = Query(default=None),
    registry: CalendarSessionRegistry = Depends(get_session_registry),
):
    return registry.get(resolve_clinician(clinician_id)).select_day(data.date)


@router.post('/session/new-appointment', response_model=AppointmentForm)
def request_new_appointment(
    data: NewAppointmentRequest,
    clinician_id: str | None = Query(default=None),
    registry: CalendarSessionRegistry = Depends(get_session_registry),
):
    session = registry.get(resolve_clinician(clinician_id))
    return session.request_new_appointment(data.day, now=local_now(), patient_id=data.patient_id)


@router.post('/session/edit/{appointment_id}', response_model=AppointmentForm)
def request_edit_appointment(
    appointment_id: str,
    clinician_id: str | None = Query(default=None),
    gateway: AppointmentGateway = Depends(get_gateway),
    registry: CalendarSessionRegistry = Depends(get_session_registry),
):
    session = registry.get(resolve_clinician(clinician_id))
    try:
        appointment = gateway.get(appointment_id)
    except SchedulingError as exc:
        raise scheduling_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc

    return session.request_edit_appointment(appointment, now=local_now())


@router.get('/suggested-times', response_model=SuggestedTimesResponse)
def list_suggested_times(day: date = Query(...)):
    return SuggestedTimesResponse(
        date=day,
        times=[slot.strftime(TIME_FORMAT) for slot in suggested_times(day, local_now())],
    )


@router.get('/form-options', response_model=FormOptions)
def get_form_options():
    return form_options()
