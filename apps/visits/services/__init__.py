"""Services for visit sessions, guests and nominations."""

from .exceptions import (
    VisitServiceError,
    VisitNotFoundError,
    VisitNotActiveError,
    TableUnavailableError,
    NominationNotFoundError,
    CastAlreadyEngagedError,
    GuestNotFoundError,
    GuestAlreadyPresentError,
    GuestCheckedOutError,
)
from .session_management import (
    get_visit,
    start_visit,
    move_table,
    cancel_visit,
    active_visits,
    release_table,
    close_open_segment,
    check_out_party,
)
from .nominations import add_nomination, end_nomination
from .guests import (
    get_guest,
    visit_guests,
    add_guest,
    check_out_guest,
    transfer_guest,
    set_primary_payer,
)

__all__ = [
    # Exceptions
    'VisitServiceError',
    'VisitNotFoundError',
    'VisitNotActiveError',
    'TableUnavailableError',
    'NominationNotFoundError',
    'CastAlreadyEngagedError',
    'GuestNotFoundError',
    'GuestAlreadyPresentError',
    'GuestCheckedOutError',
    # Services
    'get_visit',
    'start_visit',
    'move_table',
    'cancel_visit',
    'active_visits',
    'release_table',
    'close_open_segment',
    'check_out_party',
    'add_nomination',
    'end_nomination',
    # Guests
    'get_guest',
    'visit_guests',
    'add_guest',
    'check_out_guest',
    'transfer_guest',
    'set_primary_payer',
]
