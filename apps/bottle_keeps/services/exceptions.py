"""Domain-specific exceptions for bottle-keep services."""


class BottleKeepServiceError(Exception):
    """Base exception for bottle-keep services."""
    pass


class BottleKeepNotFoundError(BottleKeepServiceError):
    """Raised when bottle keep does not exist."""
    pass


class BottleNotActiveError(BottleKeepServiceError):
    """Raised when serving or moving a bottle that is not active."""
    pass
