"""Domain-specific exceptions for cast services."""


class CastServiceError(Exception):
    """Base exception for cast services."""
    pass


class CastNotFoundError(CastServiceError):
    """Raised when cast profile does not exist."""
    pass


class CastProfileExistsError(CastServiceError):
    """Raised when the staff member already has a cast profile."""
    pass


class NotCastStaffError(CastServiceError):
    """Raised when the staff member does not have the cast role."""
    pass
