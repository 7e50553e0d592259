"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPeriodError(DomainException):
    """Unknown period type or projection mode"""

    pass


class UnsupportedFrequencyError(DomainException):
    """Recurring template uses a frequency the calendar cannot step"""

    pass


class InvalidSnapshotError(DomainException):
    """Accounts/templates/purchases payload failed validation"""

    pass
