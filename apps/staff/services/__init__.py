"""Services for staff business logic."""

from .exceptions import (
    StaffServiceError,
    StaffNotFoundError,
    DuplicateStaffAccountError,
    InvalidStaffOperationError,
)
from .staff_management import (
    get_staff,
    create_staff,
    update_staff,
    deactivate_staff,
    search_staff,
    unregistered_casts,
)

__all__ = [
    # Exceptions
    'StaffServiceError',
    'StaffNotFoundError',
    'DuplicateStaffAccountError',
    'InvalidStaffOperationError',
    # Services
    'get_staff',
    'create_staff',
    'update_staff',
    'deactivate_staff',
    'search_staff',
    'unregistered_casts',
]
