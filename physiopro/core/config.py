import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./physiopro.db")

STORE_BACKENDS = {"sql", "memory"}
APPOINTMENT_STORE = os.getenv("APPOINTMENT_STORE", "sql").strip().lower()

OVERLAP_POLICIES = {"allow", "reject", "reject_in_person"}
OVERLAP_POLICY = os.getenv("OVERLAP_POLICY", "allow").strip().lower()

CALENDAR_TIMEZONE = os.getenv("CALENDAR_TIMEZONE", "UTC")
DEFAULT_CLINICIAN_ID = os.getenv("DEFAULT_CLINICIAN_ID", "doc_current")
SEED_DEMO_DATA = _get_bool(os.getenv("SEED_DEMO_DATA"), default=APP_ENV.lower() != "production")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:3000"])


def validate_runtime_config() -> None:
    if APPOINTMENT_STORE not in STORE_BACKENDS:
        raise RuntimeError(f"APPOINTMENT_STORE must be one of {sorted(STORE_BACKENDS)}.")
    if OVERLAP_POLICY not in OVERLAP_POLICIES:
        raise RuntimeError(f"OVERLAP_POLICY must be one of {sorted(OVERLAP_POLICIES)}.")
    if APP_ENV.lower() == "production" and APPOINTMENT_STORE == "memory":
        raise RuntimeError("The in-memory appointment store cannot be used in production.")
