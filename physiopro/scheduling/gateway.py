"""Create/update entry point for appointments.

The gateway is the only writer of the appointment store. Calendar views read
snapshots from the store and hand intents back to the gateway.
"""

import logging
from datetime import datetime
from uuid import uuid4

from physiopro.scheduling.errors import ConflictError, NotFoundError
from physiopro.scheduling.overlap import AllowOverlaps, OverlapPolicy
from physiopro.scheduling.schemas import ACTIVE_STATUSES, Appointment, AppointmentDraft, AppointmentStatus
from physiopro.scheduling.store import AppointmentStore

logger = logging.getLogger(__name__)

APPOINTMENT_ID_PREFIX = 'apt_'
NON_CANCELLABLE_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED})


class AppointmentGateway:
    def __init__(self, store: AppointmentStore, overlap_policy: OverlapPolicy | None = None):
        self.store = store
        self.overlap_policy = overlap_policy or AllowOverlaps()

    def _new_id(self) -> str:
        existing_ids = self.store.ids()
        while True:
            candidate = f'{APPOINTMENT_ID_PREFIX}{uuid4().hex[:12]}'
            if candidate not in existing_ids:
                return candidate

    def _check_overlap(self, candidate: AppointmentDraft, exclude_id: str | None = None) -> None:
        try:
            self.overlap_policy.check(
                candidate,
                self.store.list(clinician_id=candidate.clinician_id),
                exclude_id=exclude_id,
            )
        except ConflictError as exc:
            logger.warning(
                'Rejected overlapping appointment for clinician %s at %s (conflicts with %s)',
                candidate.clinician_id,
                candidate.start_time.isoformat(),
                exc.conflicting_id,
            )
            raise

    def get(self, appointment_id: str) -> Appointment:
        appointment = self.store.get(appointment_id)
        if appointment is None:
            raise NotFoundError(appointment_id)
        return appointment

    def create(self, draft: AppointmentDraft) -> Appointment:
        self._check_overlap(draft)

        appointment = Appointment(
            **draft.model_dump(include=set(AppointmentDraft.model_fields)),
            id=self._new_id(),
            status=AppointmentStatus.SCHEDULED,
        )
        created = self.store.create(appointment)
        logger.info(
            'Created appointment %s for patient %s at %s',
            created.id,
            created.patient_id,
            created.start_time.isoformat(),
        )
        return created

    def update(self, appointment: Appointment) -> Appointment:
        if self.store.get(appointment.id) is None:
            raise NotFoundError(appointment.id)

        if appointment.status in ACTIVE_STATUSES:
            self._check_overlap(appointment, exclude_id=appointment.id)

        updated = self.store.update(appointment)
        logger.info('Updated appointment %s (status %s)', updated.id, updated.status.value)
        return updated

    def cancel(self, appointment_id: str) -> Appointment:
        appointment = self.get(appointment_id)
        if appointment.status in NON_CANCELLABLE_STATUSES:
            raise ConflictError(f'A {appointment.status.value} appointment cannot be cancelled.')

        cancelled = self.store.update(appointment.model_copy(update={'status': AppointmentStatus.CANCELLED}))
        logger.info('Cancelled appointment %s', cancelled.id)
        return cancelled

    def upcoming_for_patient(self, patient_id: str, now: datetime) -> list[Appointment]:
        return sorted(
            (
                appointment
                for appointment in self.store.list(patient_id=patient_id)
                if appointment.status == AppointmentStatus.SCHEDULED and appointment.start_time >= now
            ),
            key=lambda appointment: appointment.start_time,
        )

    def past_for_patient(self, patient_id: str, now: datetime) -> list[Appointment]:
        return sorted(
            (
                appointment
                for appointment in self.store.list(patient_id=patient_id)
                if appointment.status != AppointmentStatus.SCHEDULED or appointment.start_time < now
            ),
            key=lambda appointment: appointment.start_time,
            reverse=True,
        )
