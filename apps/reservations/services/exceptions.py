"""Domain-specific exceptions for reservation services."""


class ReservationServiceError(Exception):
    """Base exception for reservation services."""
    pass


class ReservationNotFoundError(ReservationServiceError):
    """Raised when reservation does not exist."""
    pass


class TableNotAvailableError(ReservationServiceError):
    """Raised when the table is already booked for the slot."""
    pass


class InvalidReservationTransitionError(ReservationServiceError):
    """Raised when the status change is not allowed from the current status."""
    pass


class CapacityExceededError(ReservationServiceError):
    """Raised when the party is larger than the table."""
    pass
