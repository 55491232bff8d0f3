"""Demo patients and appointments for local development."""

import logging
from datetime import date, datetime, time, timedelta

from physiopro.scheduling.schemas import Appointment, AppointmentStatus
from physiopro.scheduling.store import AppointmentStore

logger = logging.getLogger(__name__)

DEMO_PATIENTS = {
    'p1': 'Alice Green',
    'p2': 'Bob White',
    'p3': 'Charlie Black',
}
DEMO_CLINICIAN_ID = 'doc_current'


def patient_name(patient_id: str) -> str:
    return DEMO_PATIENTS.get(patient_id, 'Patient')


def demo_appointments(today: date, clinician_id: str = DEMO_CLINICIAN_ID) -> list[Appointment]:
    def at(days: int, hour: int) -> datetime:
        return datetime.combine(today + timedelta(days=days), time(hour, 0))

    return [
        Appointment(
            id='apt1', patient_id='p1', clinician_id=clinician_id,
            start_time=at(1, 10), end_time=at(1, 11),
            title='Follow-up for Alice', status=AppointmentStatus.SCHEDULED, appointment_type='Follow-up',
        ),
        Appointment(
            id='apt2', patient_id='p2', clinician_id=clinician_id,
            start_time=at(2, 14), end_time=at(2, 15),
            title='Initial Assessment Bob', status=AppointmentStatus.SCHEDULED,
            appointment_type='Initial Consultation',
        ),
        Appointment(
            id='apt3', patient_id='p1', clinician_id=clinician_id,
            start_time=at(-1, 10), end_time=at(-1, 11),
            title='Alice Previous Session', status=AppointmentStatus.COMPLETED, appointment_type='Follow-up',
        ),
    ]


def seed_demo_data(store: AppointmentStore, today: date, clinician_id: str = DEMO_CLINICIAN_ID) -> int:
    existing_ids = store.ids()
    created = 0
    for appointment in demo_appointments(today, clinician_id):
        if appointment.id in existing_ids:
            continue
        store.create(appointment)
        created += 1

    if created:
        logger.info('Seeded %d demo appointments for %s', created, clinician_id)
    return created
