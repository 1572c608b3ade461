"""Floor tables: CRUD, status changes and availability lookups."""

import logging
from datetime import date, time
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.reservations.services.availability import conflicting_reservations
from ..models import Table, TableStatus
from .exceptions import (
    TableNotFoundError,
    DuplicateTableNameError,
    TableOccupiedError,
    InvalidTableStatusError,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('table_name', 'capacity', 'location', 'is_vip', 'is_active')


def get_table(*, table_id: UUID, lock: bool = False) -> Table:
    qs = Table.objects.select_for_update() if lock else Table.objects.all()
    try:
        return qs.get(id=table_id)
    except Table.DoesNotExist:
        raise TableNotFoundError(f"Table {table_id} not found")


def _has_active_visit(table: Table) -> bool:
    visit = table.current_visit
    return visit is not None and visit.status == 'active'


@transaction.atomic
def create_table(**fields) -> Table:
    data = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
    if Table.objects.filter(table_name=data['table_name']).exists():
        raise DuplicateTableNameError(f"Table {data['table_name']} already exists")
    table = Table.objects.create(**data)
    logger.info('Table %s created', table.table_name)
    return table


@transaction.atomic
def update_table(*, table_id: UUID, **fields) -> Table:
    table = get_table(table_id=table_id, lock=True)
    name = fields.get('table_name')
    if name and Table.objects.filter(table_name=name).exclude(id=table.id).exists():
        raise DuplicateTableNameError(f"Table {name} already exists")
    if fields.get('is_active') is False and _has_active_visit(table):
        raise TableOccupiedError(f"Table {table.table_name} has an active visit")

    for key, value in fields.items():
        if key in EDITABLE_FIELDS:
            setattr(table, key, value)
    table.save()
    return table


@transaction.atomic
def delete_table(*, table_id: UUID) -> None:
    table = get_table(table_id=table_id, lock=True)
    if _has_active_visit(table):
        raise TableOccupiedError(f"Table {table.table_name} has an active visit")
    table.delete()
    logger.info('Table %s deleted', table_id)


@transaction.atomic
def update_table_status(*, table_id: UUID, status: str) -> Table:
    """
    Set a table's floor status by hand.

    ``occupied`` is reserved for visits (see ``apps.visits``), and a table
    holding an active visit cannot be released here.

    Raises:
        InvalidTableStatusError: If status is occupied
        TableOccupiedError: If the table still has an active visit
    """
    if status == TableStatus.OCCUPIED:
        raise InvalidTableStatusError("Tables become occupied only by starting a visit")

    table = get_table(table_id=table_id, lock=True)
    if _has_active_visit(table):
        raise TableOccupiedError(f"Table {table.table_name} has an active visit")

    table.current_status = status
    table.current_visit = None
    table.save(update_fields=['current_status', 'current_visit', 'updated_at'])
    logger.info('Table %s set to %s', table.table_name, status)
    return table


def set_available(*, table_id: UUID) -> Table:
    return update_table_status(table_id=table_id, status=TableStatus.AVAILABLE)


def set_cleaning(*, table_id: UUID) -> Table:
    return update_table_status(table_id=table_id, status=TableStatus.CLEANING)


def search_tables(
    *,
    status: Optional[str] = None,
    is_vip: Optional[bool] = None,
    is_active: Optional[bool] = None,
    min_capacity: Optional[int] = None,
    max_capacity: Optional[int] = None,
) -> QuerySet:
    qs = Table.objects.select_related('current_visit')
    if status:
        qs = qs.filter(current_status=status)
    if is_vip is not None:
        qs = qs.filter(is_vip=is_vip)
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    if min_capacity is not None:
        qs = qs.filter(capacity__gte=min_capacity)
    if max_capacity is not None:
        qs = qs.filter(capacity__lte=max_capacity)
    return qs


def available_tables(
    *,
    capacity: int = 1,
    reservation_date: Optional[date] = None,
    reservation_time: Optional[time] = None,
) -> list:
    """
    Active, currently available tables that seat ``capacity`` guests.

    With a date and time, tables holding a conflicting reservation in that
    slot are left out.
    """
    tables = list(
        Table.objects.filter(
            is_active=True,
            current_status=TableStatus.AVAILABLE,
            capacity__gte=capacity,
        ).order_by('capacity', 'table_name')
    )
    if reservation_date is None or reservation_time is None:
        return tables

    return [
        table for table in tables
        if not conflicting_reservations(
            table_id=table.id,
            reservation_date=reservation_date,
            reservation_time=reservation_time,
        ).exists()
    ]
