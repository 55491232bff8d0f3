"""Month grid and day-detail views assembled from an appointment snapshot."""

from datetime import date, datetime

from pydantic import BaseModel

from physiopro.calendar.availability import SUGGESTED_AVAILABILITY_TOOLTIP, SuggestedSlots
from physiopro.calendar.grid import WEEKDAY_LABELS, month_weeks, same_month
from physiopro.calendar.index import MAX_GRID_BADGES, AppointmentIndex
from physiopro.scheduling.schemas import Appointment

TELEHEALTH_ICON = 'video'
IN_PERSON_ICON = 'map-pin'


class AppointmentBadge(BaseModel):
    id: str
    label: str
    appointment_type: str
    start_time: datetime
    icon: str


class DayCell(BaseModel):
    date: date
    badges: list[AppointmentBadge]
    more_count: int
    is_today: bool
    is_selected: bool
    is_current_month: bool
    is_suggested_slot: bool
    suggestion_tooltip: str | None = None


class MonthView(BaseModel):
    month: str
    label: str
    selected_date: date | None
    weekdays: list[str]
    weeks: list[list[DayCell]]
    legend: list[str]


class DayDetailEntry(BaseModel):
    id: str
    label: str
    appointment_type: str
    patient_id: str
    start_time: datetime
    end_time: datetime
    status: str
    icon: str


class DayDetail(BaseModel):
    date: date
    label: str
    appointments: list[DayDetailEntry]


def _icon(appointment: Appointment) -> str:
    return TELEHEALTH_ICON if appointment.is_telehealth else IN_PERSON_ICON


def build_day_cell(
    day: date,
    index: AppointmentIndex,
    viewing_month: date,
    today: date,
    selected_date: date | None = None,
    suggested: SuggestedSlots | None = None,
) -> DayCell:
    suggested = suggested or SuggestedSlots()
    badges, more_count = index.badges_for(day, MAX_GRID_BADGES)
    return DayCell(
        date=day,
        badges=[
            AppointmentBadge(
                id=appointment.id,
                label=appointment.label,
                appointment_type=appointment.appointment_type,
                start_time=appointment.start_time,
                icon=_icon(appointment),
            )
            for appointment in badges
        ],
        more_count=more_count,
        is_today=day == today,
        is_selected=selected_date is not None and day == selected_date,
        is_current_month=same_month(day, viewing_month),
        is_suggested_slot=suggested.is_suggested(day),
        suggestion_tooltip=suggested.tooltip_for(day),
    )


def build_month_view(
    appointments: list[Appointment],
    viewing_month: date,
    today: date,
    selected_date: date | None = None,
    suggested: SuggestedSlots | None = None,
) -> MonthView:
    index = AppointmentIndex(appointments)
    return MonthView(
        month=viewing_month.strftime('%Y-%m'),
        label=viewing_month.strftime('%B %Y'),
        selected_date=selected_date,
        weekdays=list(WEEKDAY_LABELS),
        weeks=[
            [
                build_day_cell(day, index, viewing_month, today, selected_date, suggested)
                for day in week
            ]
            for week in month_weeks(viewing_month)
        ],
        legend=[SUGGESTED_AVAILABILITY_TOOLTIP, 'Today'],
    )


def build_day_detail(appointments: list[Appointment], day: date) -> DayDetail:
    index = AppointmentIndex(appointments)
    return DayDetail(
        date=day,
        label=f"{day.strftime('%A, %B')} {day.day}",
        appointments=[
            DayDetailEntry(
                id=appointment.id,
                label=appointment.label,
                appointment_type=appointment.appointment_type,
                patient_id=appointment.patient_id,
                start_time=appointment.start_time,
                end_time=appointment.end_time,
                status=appointment.status.value,
                icon=_icon(appointment),
            )
            for appointment in index.day_detail(day)
        ],
    )
