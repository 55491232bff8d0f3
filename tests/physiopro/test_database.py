import os

import pytest
from sqlalchemy import create_engine, inspect

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from physiopro import database  # noqa: E402
from physiopro.models.appointment import AppointmentRecord  # noqa: E402


@pytest.fixture
def schema_engine(tmp_path, monkeypatch: pytest.MonkeyPatch):
    engine = create_engine(f"sqlite:///{tmp_path / 'schema.db'}")
    monkeypatch.setattr(database, 'engine', engine)
    monkeypatch.setattr(database, '_appointment_schema_checked', False)
    try:
        yield engine
    finally:
        engine.dispose()


def test_ensure_appointment_schema_adds_lookup_indexes(schema_engine) -> None:
    database.Base.metadata.create_all(bind=schema_engine, tables=[AppointmentRecord.__table__])

    database.ensure_appointment_schema()
    database.ensure_appointment_schema()

    index_names = {index['name'] for index in inspect(schema_engine).get_indexes('appointments')}
    column_names = {column['name'] for column in inspect(schema_engine).get_columns('appointments')}

    assert {'idx_appointments_clinician_start', 'idx_appointments_patient_start'} <= index_names
    assert {'title', 'notes'} <= column_names
    assert database._appointment_schema_checked


def test_ensure_appointment_schema_skips_missing_table(schema_engine) -> None:
    database.ensure_appointment_schema()

    assert 'appointments' not in inspect(schema_engine).get_table_names()
    assert database._appointment_schema_checked
