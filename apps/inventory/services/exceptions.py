"""Domain-specific exceptions for inventory services."""


class InventoryServiceError(Exception):
    """Base exception for inventory services."""
    pass


class ProductNotFoundError(InventoryServiceError):
    """Raised when product does not exist."""
    pass


class InsufficientStockError(InventoryServiceError):
    """Raised when a movement would leave negative stock."""
    pass


class InvalidMovementError(InventoryServiceError):
    """Raised when a movement has an unknown type or bad quantity."""
    pass
