"""Domain-specific exceptions for visit services."""


class VisitServiceError(Exception):
    """Base exception for visit services."""
    pass


class VisitNotFoundError(VisitServiceError):
    """Raised when visit does not exist."""
    pass


class VisitNotActiveError(VisitServiceError):
    """Raised when the visit is already completed or cancelled."""
    pass


class TableUnavailableError(VisitServiceError):
    """Raised when the target table cannot take a new visit."""
    pass


class NominationNotFoundError(VisitServiceError):
    """Raised when nomination does not exist."""
    pass


class CastAlreadyEngagedError(VisitServiceError):
    """Raised when the cast is already active on this visit."""
    pass


class GuestNotFoundError(VisitServiceError):
    """Raised when visit guest does not exist."""
    pass


class GuestAlreadyPresentError(VisitServiceError):
    """Raised when the customer is already a guest on the visit."""
    pass


class GuestCheckedOutError(VisitServiceError):
    """Raised when the guest has already left."""
    pass
