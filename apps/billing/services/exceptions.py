"""Domain-specific exceptions for billing services."""


class BillingServiceError(Exception):
    """Base exception for billing services."""
    pass


class OrderItemNotFoundError(BillingServiceError):
    """Raised when order item does not exist."""
    pass


class VisitClosedError(BillingServiceError):
    """Raised when the visit no longer accepts orders or payment."""
    pass


class ProductUnavailableError(BillingServiceError):
    """Raised when the product is inactive or out of stock."""
    pass


class DailyClosingError(BillingServiceError):
    """Raised when a day cannot be closed."""
    pass


class InvalidSplitError(BillingServiceError):
    """Raised when guest shares of an order item do not add up."""
    pass
