"""Double-booking policies applied by the gateway before a write."""

from typing import Iterable

from physiopro.scheduling.errors import ConflictError
from physiopro.scheduling.schemas import ACTIVE_STATUSES, Appointment, AppointmentDraft


class OverlapPolicy:
    name = 'allow'

    def check(self, candidate: AppointmentDraft, existing: Iterable[Appointment], exclude_id: str | None = None) -> None:
        """Raise ``ConflictError`` when ``candidate`` may not share time with ``existing``."""


class AllowOverlaps(OverlapPolicy):
    name = 'allow'


class RejectOverlaps(OverlapPolicy):
    name = 'reject'

    def exempt(self, appointment: AppointmentDraft) -> bool:
        return False

    def check(self, candidate: AppointmentDraft, existing: Iterable[Appointment], exclude_id: str | None = None) -> None:
        if self.exempt(candidate):
            return

        for appointment in existing:
            if appointment.id == exclude_id:
                continue
            if appointment.clinician_id != candidate.clinician_id:
                continue
            if appointment.status not in ACTIVE_STATUSES or self.exempt(appointment):
                continue
            if candidate.overlaps(appointment):
                raise ConflictError('This time is already booked.', conflicting_id=appointment.id)


class RejectInPersonOverlaps(RejectOverlaps):
    """Telehealth check-ins may be double-booked; in-person visits may not."""

    name = 'reject_in_person'

    def exempt(self, appointment: AppointmentDraft) -> bool:
        return appointment.is_telehealth


OVERLAP_POLICIES = {
    policy.name: policy
    for policy in (AllowOverlaps, RejectOverlaps, RejectInPersonOverlaps)
}


def get_overlap_policy(name: str) -> OverlapPolicy:
    try:
        return OVERLAP_POLICIES[name.strip().lower()]()
    except KeyError as exc:
        raise ValueError(f'Unknown overlap policy: {name}') from exc
