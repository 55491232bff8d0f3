import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from physiopro.core import config
from physiopro.core.clock import local_today
from physiopro.database import Base, SessionLocal, engine, ensure_appointment_schema
from physiopro.models import appointment
from physiopro.routes import appointment_routes, calendar_routes
from physiopro.routes.dependencies import memory_store
from physiopro.scheduling.seed import seed_demo_data
from physiopro.scheduling.store import SqlAppointmentStore

logging.basicConfig(level=config.LOG_LEVEL.upper())
config.validate_runtime_config()

app = FastAPI(title='PhysioPro Scheduling')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


def seed_store() -> None:
    if config.APPOINTMENT_STORE == 'memory':
        seed_demo_data(memory_store, local_today(), config.DEFAULT_CLINICIAN_ID)
        return

    db = SessionLocal()
    try:
        seed_demo_data(SqlAppointmentStore(db), local_today(), config.DEFAULT_CLINICIAN_ID)
    finally:
        db.close()


@app.on_event('startup')
def initialize_database() -> None:
    try:
        if config.APPOINTMENT_STORE == 'sql':
            Base.metadata.create_all(bind=engine, tables=[appointment.AppointmentRecord.__table__])
            ensure_appointment_schema()
        if config.SEED_DEMO_DATA:
            seed_store()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'PhysioPro Scheduling API Running'}


app.include_router(calendar_routes.router, prefix='/calendar')
app.include_router(appointment_routes.router, prefix='/appointments')
