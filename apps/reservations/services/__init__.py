"""Services for reservation business logic."""

from .exceptions import (
    ReservationServiceError,
    ReservationNotFoundError,
    TableNotAvailableError,
    InvalidReservationTransitionError,
    CapacityExceededError,
)
from .availability import conflicting_reservations, check_availability
from .reservation_management import (
    get_reservation,
    create_reservation,
    update_reservation,
    confirm_reservation,
    check_in_reservation,
    complete_reservation,
    cancel_reservation,
    mark_no_show,
    search_reservations,
    today_reservations,
)

__all__ = [
    # Exceptions
    'ReservationServiceError',
    'ReservationNotFoundError',
    'TableNotAvailableError',
    'InvalidReservationTransitionError',
    'CapacityExceededError',
    # Services
    'conflicting_reservations',
    'check_availability',
    'get_reservation',
    'create_reservation',
    'update_reservation',
    'confirm_reservation',
    'check_in_reservation',
    'complete_reservation',
    'cancel_reservation',
    'mark_no_show',
    'search_reservations',
    'today_reservations',
]
