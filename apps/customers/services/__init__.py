"""Services for customer business logic."""

from .exceptions import (
    CustomerServiceError,
    CustomerNotFoundError,
    DuplicatePhoneNumberError,
    CustomerHasHistoryError,
)
from .customer_management import (
    get_customer,
    create_customer,
    update_customer,
    delete_customer,
    search_customers,
    bulk_update_status,
)

__all__ = [
    # Exceptions
    'CustomerServiceError',
    'CustomerNotFoundError',
    'DuplicatePhoneNumberError',
    'CustomerHasHistoryError',
    # Services
    'get_customer',
    'create_customer',
    'update_customer',
    'delete_customer',
    'search_customers',
    'bulk_update_status',
]
