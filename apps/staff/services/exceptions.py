"""Domain-specific exceptions for staff services."""


class StaffServiceError(Exception):
    """Base exception for staff services."""
    pass


class StaffNotFoundError(StaffServiceError):
    """Raised when staff member does not exist."""
    pass


class DuplicateStaffAccountError(StaffServiceError):
    """Raised when the login email is already in use."""
    pass


class InvalidStaffOperationError(StaffServiceError):
    """Raised when an operation is not allowed on this staff member."""
    pass
