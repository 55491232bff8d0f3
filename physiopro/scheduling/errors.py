class SchedulingError(Exception):
    """Base class for appointment scheduling failures."""


class NotFoundError(SchedulingError):
    def __init__(self, appointment_id: str):
        super().__init__(f'Appointment {appointment_id} not found.')
        self.appointment_id = appointment_id


class ConflictError(SchedulingError):
    def __init__(self, message: str, conflicting_id: str | None = None):
        super().__init__(message)
        self.conflicting_id = conflicting_id
