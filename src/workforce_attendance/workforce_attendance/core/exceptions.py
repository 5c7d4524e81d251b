class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed (date, status, employee id, ...)."""


class NotFoundError(DomainError):
    """Raised when a record or employee does not exist."""


class InvalidPunchSequenceError(DomainError):
    """Raised when a punch would break the IN/OUT alternation."""


class SessionAlreadyClosedError(DomainError):
    """Raised when the day's IN/OUT session is already complete."""


class AlreadyMarkedError(DomainError):
    """Raised when a record already exists for the employee and date."""


class ConflictError(DomainError):
    """Raised when a concurrent write is detected by an optimistic check."""


class AttendanceTimeoutError(DomainError):
    """Raised when a lock or collaborator call exceeds its deadline."""


class OperationCancelledError(DomainError):
    """Raised when the caller cancelled an operation before it was applied."""
