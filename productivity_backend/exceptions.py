"""
Custom exceptions for the productivity dashboard.
Route handlers translate these into HTTP errors.
"""


class DashboardException(Exception):
    """Base exception for the dashboard application"""
    pass


class RecordNotFoundException(DashboardException):
    """Raised when a daily record is not found"""
    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(f"Record with ID {record_id} not found")


class OutputTypeNotFoundException(DashboardException):
    """Raised when an output type is not found"""
    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f'Output type "{identifier}" not found')


class OutputEntryNotFoundException(DashboardException):
    """Raised when an output entry is not found"""
    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Output entry with ID {entry_id} not found")


class DuplicateOutputTypeException(DashboardException):
    """Raised when an output type name is already taken"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Output type "{name}" already exists')


class SessionNotFoundException(DashboardException):
    """Raised when a deep work session is not found"""
    def __init__(self, session_id: int):
        self.session_id = session_id
        super().__init__(f"Session with ID {session_id} not found")


class InvalidDateException(DashboardException):
    """Raised when a date string cannot be parsed"""
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date: {value!r}. Use YYYY-MM-DD")


class ValidationException(DashboardException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error for {field}: {message}")
