"""Visit sessions: seating, table moves and cancellation."""

import logging
import secrets
import string
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.tables.models import Table, TableStatus
from ..models import Visit, VisitStatus, PaymentStatus, TableSegment, VisitGuest, GuestType
from .exceptions import VisitNotFoundError, VisitNotActiveError, TableUnavailableError

logger = logging.getLogger(__name__)

SESSION_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_session_code() -> str:
    """Return a unique code such as ``V20250108-7QX2``."""
    prefix = f"V{timezone.localdate():%Y%m%d}-"
    while True:
        code = prefix + ''.join(secrets.choice(SESSION_CODE_ALPHABET) for _ in range(4))
        if not Visit.objects.filter(session_code=code).exists():
            return code


def get_visit(*, visit_id: UUID, lock: bool = False) -> Visit:
    qs = Visit.objects.select_for_update() if lock else Visit.objects.select_related('customer', 'table')
    try:
        return qs.get(id=visit_id)
    except Visit.DoesNotExist:
        raise VisitNotFoundError(f"Visit {visit_id} not found")


def _lock_free_table(table_id: UUID) -> Table:
    """Lock a table and make sure it can take a new visit."""
    try:
        table = Table.objects.select_for_update().get(id=table_id)
    except Table.DoesNotExist:
        raise TableUnavailableError(f"Table {table_id} not found")

    if not table.is_active:
        raise TableUnavailableError(f"Table {table.table_name} is not in service")
    if table.current_status not in (TableStatus.AVAILABLE, TableStatus.RESERVED):
        raise TableUnavailableError(f"Table {table.table_name} is {table.current_status}")
    if Visit.objects.filter(table=table, status=VisitStatus.ACTIVE).exists():
        raise TableUnavailableError(f"Table {table.table_name} already has an active visit")
    return table


def _occupy(table: Table, visit: Visit) -> None:
    table.current_status = TableStatus.OCCUPIED
    table.current_visit = visit
    table.save(update_fields=['current_status', 'current_visit', 'updated_at'])


def release_table(table: Table) -> None:
    """Send a table to cleaning once its visit has left it."""
    table.current_status = TableStatus.CLEANING
    table.current_visit = None
    table.save(update_fields=['current_status', 'current_visit', 'updated_at'])


def close_open_segment(visit: Visit, when=None) -> None:
    TableSegment.objects.filter(visit=visit, ended_at__isnull=True).update(
        ended_at=when or timezone.now()
    )


def check_out_party(visit: Visit, when=None) -> None:
    visit.guests.filter(check_out_at__isnull=True).update(check_out_at=when or timezone.now())


@transaction.atomic
def start_visit(*, customer_id: UUID, table_id: UUID, num_guests: int = 1, notes: str = '', created_by=None) -> Visit:
    """
    Seat a customer at a table.

    The table must be active, available (or reserved for this party) and
    free of any active visit. It becomes occupied and points at the visit.
    The customer is recorded as the main guest and primary payer.

    Raises:
        TableUnavailableError: If the table cannot be used
    """
    table = _lock_free_table(table_id)

    visit = Visit.objects.create(
        session_code=generate_session_code(),
        customer_id=customer_id,
        table=table,
        num_guests=num_guests,
        notes=notes,
        created_by=created_by,
    )
    TableSegment.objects.create(visit=visit, table=table, reason='initial')
    VisitGuest.objects.create(
        visit=visit, customer_id=customer_id, guest_type=GuestType.MAIN, is_primary_payer=True
    )
    _occupy(table, visit)

    logger.info('Visit %s started at table %s', visit.session_code, table.table_name)
    return visit


@transaction.atomic
def move_table(*, visit_id: UUID, to_table_id: UUID, reason: str = 'move') -> Visit:
    """
    Move an active visit to another table in one transaction.

    The current segment is closed and a new one opened; the old table goes
    to cleaning and the new one becomes occupied.

    Raises:
        VisitNotActiveError: If the visit is no longer active
        TableUnavailableError: If the destination table is not free
    """
    visit = get_visit(visit_id=visit_id, lock=True)
    if visit.status != VisitStatus.ACTIVE:
        raise VisitNotActiveError(f"Visit {visit.session_code} is {visit.status}")
    if str(visit.table_id) == str(to_table_id):
        raise TableUnavailableError("Visit is already seated at this table")

    old_table = Table.objects.select_for_update().get(id=visit.table_id)
    new_table = _lock_free_table(to_table_id)

    now = timezone.now()
    close_open_segment(visit, when=now)
    TableSegment.objects.create(visit=visit, table=new_table, started_at=now, reason=reason)

    release_table(old_table)
    visit.table = new_table
    visit.save(update_fields=['table', 'updated_at'])
    _occupy(new_table, visit)

    logger.info(
        'Visit %s moved from %s to %s', visit.session_code, old_table.table_name, new_table.table_name
    )
    return visit


@transaction.atomic
def cancel_visit(*, visit_id: UUID, reason: str = '') -> Visit:
    """Cancel an active visit and free its table for cleaning."""
    visit = get_visit(visit_id=visit_id, lock=True)
    if visit.status != VisitStatus.ACTIVE:
        raise VisitNotActiveError(f"Visit {visit.session_code} is {visit.status}")

    now = timezone.now()
    visit.status = VisitStatus.CANCELLED
    visit.payment_status = PaymentStatus.CANCELLED
    visit.check_out_at = now
    if reason:
        visit.notes = f"{visit.notes}\n{reason}".strip()
    visit.save()

    close_open_segment(visit, when=now)
    check_out_party(visit, when=now)
    visit.nominations.filter(is_active=True).update(is_active=False, ended_at=now)
    release_table(Table.objects.select_for_update().get(id=visit.table_id))

    logger.info('Visit %s cancelled', visit.session_code)
    return visit


def active_visits() -> QuerySet:
    return (
        Visit.objects
        .filter(status=VisitStatus.ACTIVE)
        .select_related('customer', 'table')
        .prefetch_related('nominations__cast')
        .order_by('-check_in_at')
    )
