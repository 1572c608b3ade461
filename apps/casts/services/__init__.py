"""Services for cast business logic."""

from .exceptions import (
    CastServiceError,
    CastNotFoundError,
    CastProfileExistsError,
    NotCastStaffError,
)
from .profile_management import (
    get_cast,
    get_cast_for_user,
    create_cast_profile,
    update_cast_profile,
    deactivate_cast,
    search_casts,
)
from .performance import (
    record_performance,
    performance_history,
    cast_ranking,
    calculate_compensation,
    calculate_all_compensations,
)

__all__ = [
    # Exceptions
    'CastServiceError',
    'CastNotFoundError',
    'CastProfileExistsError',
    'NotCastStaffError',
    # Services
    'get_cast',
    'get_cast_for_user',
    'create_cast_profile',
    'update_cast_profile',
    'deactivate_cast',
    'search_casts',
    'record_performance',
    'performance_history',
    'cast_ranking',
    'calculate_compensation',
    'calculate_all_compensations',
]
