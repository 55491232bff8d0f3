"""Appointment repositories.

Both stores return ``Appointment`` snapshots in insertion order and raise
``NotFoundError`` from ``update`` when the id is unknown.
"""

import logging
from threading import Lock
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from physiopro.models.appointment import AppointmentRecord
from physiopro.scheduling.errors import NotFoundError
from physiopro.scheduling.schemas import Appointment

logger = logging.getLogger(__name__)


class AppointmentStore(Protocol):
    def get(self, appointment_id: str) -> Appointment | None: ...

    def list(self, clinician_id: str | None = None, patient_id: str | None = None) -> list[Appointment]: ...

    def ids(self) -> set[str]: ...

    def create(self, appointment: Appointment) -> Appointment: ...

    def update(self, appointment: Appointment) -> Appointment: ...


def _matches(appointment: Appointment, clinician_id: str | None, patient_id: str | None) -> bool:
    if clinician_id is not None and appointment.clinician_id != clinician_id:
        return False
    if patient_id is not None and appointment.patient_id != patient_id:
        return False
    return True


class InMemoryAppointmentStore:
    def __init__(self, appointments: list[Appointment] | None = None):
        self._appointments: dict[str, Appointment] = {}
        self._lock = Lock()
        for appointment in appointments or []:
            self.create(appointment)

    def __len__(self) -> int:
        return len(self._appointments)

    def get(self, appointment_id: str) -> Appointment | None:
        with self._lock:
            appointment = self._appointments.get(appointment_id)
        return appointment.model_copy() if appointment else None

    def list(self, clinician_id: str | None = None, patient_id: str | None = None) -> list[Appointment]:
        with self._lock:
            snapshot = list(self._appointments.values())
        return [
            appointment.model_copy()
            for appointment in snapshot
            if _matches(appointment, clinician_id, patient_id)
        ]

    def ids(self) -> set[str]:
        with self._lock:
            return set(self._appointments)

    def create(self, appointment: Appointment) -> Appointment:
        with self._lock:
            if appointment.id in self._appointments:
                raise ValueError(f'Appointment id {appointment.id} already exists.')
            self._appointments[appointment.id] = appointment.model_copy()
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        with self._lock:
            if appointment.id not in self._appointments:
                raise NotFoundError(appointment.id)
            # Reassigning an existing key keeps its insertion position.
            self._appointments[appointment.id] = appointment.model_copy()
        return appointment


def _to_appointment(record: AppointmentRecord) -> Appointment:
    return Appointment.model_validate(record)


class SqlAppointmentStore:
    def __init__(self, db: Session):
        self.db = db

    def _record(self, appointment_id: str) -> AppointmentRecord | None:
        return self.db.query(AppointmentRecord).filter(AppointmentRecord.id == appointment_id).first()

    def get(self, appointment_id: str) -> Appointment | None:
        record = self._record(appointment_id)
        return _to_appointment(record) if record else None

    def list(self, clinician_id: str | None = None, patient_id: str | None = None) -> list[Appointment]:
        query = self.db.query(AppointmentRecord)
        if clinician_id is not None:
            query = query.filter(AppointmentRecord.clinician_id == clinician_id)
        if patient_id is not None:
            query = query.filter(AppointmentRecord.patient_id == patient_id)
        return [_to_appointment(record) for record in query.order_by(AppointmentRecord.row_id.asc()).all()]

    def ids(self) -> set[str]:
        return {appointment_id for (appointment_id,) in self.db.query(AppointmentRecord.id).all()}

    def create(self, appointment: Appointment) -> Appointment:
        record = AppointmentRecord(**self._columns(appointment))
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception('Failed to insert appointment %s', appointment.id)
            raise
        return _to_appointment(record)

    def update(self, appointment: Appointment) -> Appointment:
        record = self._record(appointment.id)
        if record is None:
            raise NotFoundError(appointment.id)

        for column, value in self._columns(appointment).items():
            setattr(record, column, value)
        try:
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception('Failed to update appointment %s', appointment.id)
            raise
        return _to_appointment(record)

    @staticmethod
    def _columns(appointment: Appointment) -> dict:
        values = appointment.model_dump()
        values['status'] = appointment.status.value
        return values
