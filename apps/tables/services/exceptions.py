"""Domain-specific exceptions for table services."""


class TableServiceError(Exception):
    """Base exception for table services."""
    pass


class TableNotFoundError(TableServiceError):
    """Raised when table does not exist."""
    pass


class DuplicateTableNameError(TableServiceError):
    """Raised when the table name is already taken."""
    pass


class TableOccupiedError(TableServiceError):
    """Raised when an operation conflicts with the table's active visit."""
    pass


class InvalidTableStatusError(TableServiceError):
    """Raised when a status change is not allowed."""
    pass
