from fastapi import Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from physiopro.calendar.navigation import CalendarSessionRegistry
from physiopro.core import config
from physiopro.database import SessionLocal, ensure_appointment_schema
from physiopro.scheduling.errors import ConflictError, NotFoundError, SchedulingError
from physiopro.scheduling.gateway import AppointmentGateway
from physiopro.scheduling.overlap import get_overlap_policy
from physiopro.scheduling.store import AppointmentStore, InMemoryAppointmentStore, SqlAppointmentStore

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'

memory_store = InMemoryAppointmentStore()
session_registry = CalendarSessionRegistry()


def database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )


def ensure_database_ready() -> None:
    try:
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> AppointmentStore:
    if config.APPOINTMENT_STORE == 'memory':
        return memory_store
    ensure_database_ready()
    return SqlAppointmentStore(db)


def get_gateway(store: AppointmentStore = Depends(get_store)) -> AppointmentGateway:
    return AppointmentGateway(store, get_overlap_policy(config.OVERLAP_POLICY))


def get_session_registry() -> CalendarSessionRegistry:
    return session_registry


def scheduling_http_error(exc: SchedulingError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Appointment not found.')
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
