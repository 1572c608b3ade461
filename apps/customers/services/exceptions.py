"""Domain-specific exceptions for customer services."""


class CustomerServiceError(Exception):
    """Base exception for customer services."""
    pass


class CustomerNotFoundError(CustomerServiceError):
    """Raised when customer does not exist."""
    pass


class DuplicatePhoneNumberError(CustomerServiceError):
    """Raised when another customer already uses the phone number."""
    pass


class CustomerHasHistoryError(CustomerServiceError):
    """Raised when a customer with visits cannot be deleted."""
    pass
