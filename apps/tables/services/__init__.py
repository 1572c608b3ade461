"""Services for table business logic."""

from .exceptions import (
    TableServiceError,
    TableNotFoundError,
    DuplicateTableNameError,
    TableOccupiedError,
    InvalidTableStatusError,
)
from .table_management import (
    get_table,
    create_table,
    update_table,
    delete_table,
    update_table_status,
    set_available,
    set_cleaning,
    search_tables,
    available_tables,
)

__all__ = [
    # Exceptions
    'TableServiceError',
    'TableNotFoundError',
    'DuplicateTableNameError',
    'TableOccupiedError',
    'InvalidTableStatusError',
    # Services
    'get_table',
    'create_table',
    'update_table',
    'delete_table',
    'update_table_status',
    'set_available',
    'set_cleaning',
    'search_tables',
    'available_tables',
]
