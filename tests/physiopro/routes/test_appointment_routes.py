import os
from datetime import datetime

import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from physiopro.routes.appointment_routes import (  # noqa: E402
    AppointmentRequest,
    PatientAppointmentsView,
    UpdateAppointmentRequest,
    cancel_appointment,
    create_appointment,
    get_appointment,
    list_patient_appointments,
    update_appointment,
)
from physiopro.scheduling.gateway import AppointmentGateway  # noqa: E402
from physiopro.scheduling.overlap import RejectOverlaps  # noqa: E402
from physiopro.scheduling.store import InMemoryAppointmentStore  # noqa: E402


@pytest.fixture
def gateway() -> AppointmentGateway:
    return AppointmentGateway(InMemoryAppointmentStore())


def _request(**overrides) -> AppointmentRequest:
    values = {
        'patient_id': 'p1',
        'start_time': datetime(2024, 3, 15, 10, 0),
        'duration_minutes': 45,
        'appointment_type': 'follow-up',
    }
    values.update(overrides)
    return AppointmentRequest(**values)


def test_appointment_request_normalizes_fields() -> None:
    request = _request(patient_id=' p2 ', appointment_type=' ROUTINE VISIT ', notes='  stretch daily  ')

    assert request.patient_id == 'p2'
    assert request.appointment_type == 'Routine Visit'
    assert request.notes == 'stretch daily'


@pytest.mark.parametrize(
    'overrides',
    [
        {'patient_id': '   '},
        {'duration_minutes': 20},
        {'appointment_type': 'Massage'},
        {'notes': 'x' * 601},
    ],
)
def test_appointment_request_rejects_invalid_fields(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        _request(**overrides)


def test_create_appointment_fills_default_title_and_clinician(gateway: AppointmentGateway) -> None:
    response = create_appointment(_request(), gateway=gateway)

    assert response.status == 'scheduled'
    assert response.clinician_id == 'doc_current'
    assert response.title == 'Follow-up with Alice Green'
    assert response.end_time == datetime(2024, 3, 15, 10, 45)
    assert response.duration_minutes == 45
    assert len(gateway.store.list()) == 1


def test_create_appointment_keeps_custom_title_and_unknown_patient(gateway: AppointmentGateway) -> None:
    custom = create_appointment(_request(title=' Knee review '), gateway=gateway)
    unknown = create_appointment(_request(patient_id='p99'), gateway=gateway)

    assert custom.title == 'Knee review'
    assert unknown.title == 'Follow-up with Patient'


def test_create_appointment_returns_conflict_when_policy_rejects_overlap() -> None:
    gateway = AppointmentGateway(InMemoryAppointmentStore(), RejectOverlaps())
    create_appointment(_request(), gateway=gateway)

    with pytest.raises(HTTPException) as exception_info:
        create_appointment(_request(start_time=datetime(2024, 3, 15, 10, 30)), gateway=gateway)

    assert exception_info.value.status_code == 409
    assert exception_info.value.detail == 'This time is already booked.'


def test_create_appointment_returns_503_when_database_fails(
    gateway: AppointmentGateway,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def failing_create(_appointment):
        raise OperationalError('INSERT', {}, Exception('database is locked'))

    monkeypatch.setattr(gateway.store, 'create', failing_create)

    with pytest.raises(HTTPException) as exception_info:
        create_appointment(_request(), gateway=gateway)

    assert exception_info.value.status_code == 503


def test_update_appointment_replaces_fields(gateway: AppointmentGateway) -> None:
    created = create_appointment(_request(), gateway=gateway)

    updated = update_appointment(
        created.id,
        UpdateAppointmentRequest(
            patient_id='p1',
            start_time=datetime(2024, 3, 18, 14, 0),
            duration_minutes=60,
            appointment_type='Telehealth Check-in',
            title='Remote follow-up',
            status='rescheduled',
        ),
        gateway=gateway,
    )

    assert updated.id == created.id
    assert updated.start_time == datetime(2024, 3, 18, 14, 0)
    assert updated.end_time == datetime(2024, 3, 18, 15, 0)
    assert updated.status == 'rescheduled'
    assert updated.label == 'Remote follow-up'
    assert len(gateway.store.list()) == 1


def test_update_appointment_returns_not_found_for_unknown_id(gateway: AppointmentGateway) -> None:
    create_appointment(_request(), gateway=gateway)
    before = gateway.store.list()

    with pytest.raises(HTTPException) as exception_info:
        update_appointment(
            'apt_missing',
            UpdateAppointmentRequest(patient_id='p1', start_time=datetime(2024, 3, 18, 14, 0)),
            gateway=gateway,
        )

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Appointment not found.'
    assert gateway.store.list() == before


def test_cancel_appointment_then_cancel_again_conflicts(gateway: AppointmentGateway) -> None:
    created = create_appointment(_request(), gateway=gateway)

    assert cancel_appointment(created.id, gateway=gateway).status == 'cancelled'

    with pytest.raises(HTTPException) as exception_info:
        cancel_appointment(created.id, gateway=gateway)

    assert exception_info.value.status_code == 409


def test_get_appointment_returns_not_found(gateway: AppointmentGateway) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_appointment('apt_missing', gateway=gateway)

    assert exception_info.value.status_code == 404


def test_list_patient_appointments_splits_upcoming_and_past(
    gateway: AppointmentGateway,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr('physiopro.routes.appointment_routes.local_now', lambda: datetime(2024, 3, 10, 12, 0))
    upcoming = create_appointment(_request(start_time=datetime(2024, 3, 15, 10, 0)), gateway=gateway)
    past = create_appointment(_request(start_time=datetime(2024, 3, 5, 10, 0)), gateway=gateway)

    upcoming_ids = [
        appointment.id
        for appointment in list_patient_appointments('p1', view=PatientAppointmentsView.UPCOMING, gateway=gateway)
    ]
    past_ids = [
        appointment.id
        for appointment in list_patient_appointments('p1', view=PatientAppointmentsView.PAST, gateway=gateway)
    ]

    assert upcoming_ids == [upcoming.id]
    assert past_ids == [past.id]


def test_list_patient_appointments_rejects_blank_patient(gateway: AppointmentGateway) -> None:
    with pytest.raises(HTTPException) as exception_info:
        list_patient_appointments('   ', view=PatientAppointmentsView.UPCOMING, gateway=gateway)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Patient is required.'


def test_update_appointment_without_status_keeps_cancelled(gateway: AppointmentGateway) -> None:
    created = create_appointment(_request(), gateway=gateway)
    cancel_appointment(created.id, gateway=gateway)

    updated = update_appointment(
        created.id,
        UpdateAppointmentRequest(patient_id='p1', start_time=datetime(2024, 3, 16, 9, 0), title='moved'),
        gateway=gateway,
    )

    assert updated.status == 'cancelled'
    assert updated.title == 'moved'
    assert gateway.get(created.id).status == 'cancelled'


def test_blank_clinician_falls_back_to_default(gateway: AppointmentGateway) -> None:
    request = _request(clinician_id='   ')

    assert request.clinician_id is None

    created = create_appointment(request, gateway=gateway)
    updated = update_appointment(
        created.id,
        UpdateAppointmentRequest(patient_id='p1', clinician_id=' ', start_time=datetime(2024, 3, 16, 9, 0)),
        gateway=gateway,
    )

    assert created.clinician_id == 'doc_current'
    assert updated.clinician_id == 'doc_current'
    assert updated.status == 'scheduled'
