class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a student, card or notification does not exist."""


class ConflictError(DomainError):
    """Raised when a write loses to an existing record for the same key."""


class AlreadyMarkedError(ConflictError):
    """Raised when attendance was already recorded for the student and date.

    This is a legitimate race outcome (check-in vs. timer expiry), not a fault.
    """


class ReportExistsError(ConflictError):
    """Raised when a daily report already exists for the date."""


class DuplicateIdentifierError(DomainError):
    """Raised when a card ID is already assigned to another student."""


class StoreUnavailableError(DomainError):
    """Raised when the database cannot be reached."""
