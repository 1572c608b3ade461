"""Reservation lifecycle: booking, edits and status transitions."""

import logging
from datetime import date, time
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.tables.models import Table, TableStatus
from ..models import Reservation, ReservationStatus
from .availability import check_availability
from .exceptions import (
    ReservationNotFoundError,
    TableNotAvailableError,
    InvalidReservationTransitionError,
    CapacityExceededError,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'customer_id', 'table_id', 'reservation_date', 'reservation_time',
    'number_of_guests', 'assigned_cast_id', 'special_requests',
)


def get_reservation(*, reservation_id: UUID, lock: bool = False) -> Reservation:
    qs = Reservation.objects.select_for_update() if lock else Reservation.objects.select_related(
        'customer', 'table', 'assigned_cast'
    )
    try:
        return qs.get(id=reservation_id)
    except Reservation.DoesNotExist:
        raise ReservationNotFoundError(f"Reservation {reservation_id} not found")


def _validate_table(
    *,
    table_id: UUID,
    reservation_date: date,
    reservation_time: time,
    number_of_guests: int,
    exclude_id: Optional[UUID] = None,
) -> Table:
    try:
        table = Table.objects.get(id=table_id)
    except Table.DoesNotExist:
        raise TableNotAvailableError(f"Table {table_id} not found")

    if not table.is_active:
        raise TableNotAvailableError(f"Table {table.table_name} is not in service")
    if table.capacity < number_of_guests:
        raise CapacityExceededError(
            f"Table {table.table_name} seats {table.capacity}, party is {number_of_guests}"
        )
    if not check_availability(
        table_id=table.id,
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        exclude_id=exclude_id,
    ):
        raise TableNotAvailableError(
            f"Table {table.table_name} is already booked around {reservation_time:%H:%M}"
        )
    return table


def _transition(reservation: Reservation, allowed_from: tuple, target: str) -> None:
    if reservation.status not in allowed_from:
        raise InvalidReservationTransitionError(
            f"Cannot change reservation from {reservation.status} to {target}"
        )
    reservation.status = target


def _release_table(table: Optional[Table]) -> None:
    if table is None:
        return
    table = Table.objects.select_for_update().get(id=table.id)
    if table.current_status == TableStatus.RESERVED and table.current_visit_id is None:
        table.current_status = TableStatus.AVAILABLE
        table.save(update_fields=['current_status', 'updated_at'])


@transaction.atomic
def create_reservation(
    *,
    customer_id: UUID,
    reservation_date: date,
    reservation_time: time,
    number_of_guests: int,
    table_id: Optional[UUID] = None,
    assigned_cast_id: Optional[UUID] = None,
    special_requests: str = '',
    status: str = ReservationStatus.PENDING,
    created_by=None,
) -> Reservation:
    """
    Book a reservation.

    When a table is given it must be active, large enough and free within
    two hours of the requested time.

    Raises:
        TableNotAvailableError: If the table slot is taken
        CapacityExceededError: If the party does not fit the table
    """
    if table_id:
        _validate_table(
            table_id=table_id,
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            number_of_guests=number_of_guests,
        )

    reservation = Reservation.objects.create(
        customer_id=customer_id,
        table_id=table_id,
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        number_of_guests=number_of_guests,
        assigned_cast_id=assigned_cast_id,
        special_requests=special_requests,
        status=status,
        created_by=created_by,
        updated_by=created_by,
    )
    logger.info('Reservation %s booked for %s %s', reservation.id, reservation_date, reservation_time)
    return reservation


@transaction.atomic
def update_reservation(*, reservation_id: UUID, updated_by=None, **fields) -> Reservation:
    reservation = get_reservation(reservation_id=reservation_id, lock=True)
    if reservation.status not in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
        raise InvalidReservationTransitionError(
            f"A {reservation.status} reservation can no longer be edited"
        )

    for key, value in fields.items():
        if key in EDITABLE_FIELDS:
            setattr(reservation, key, value)

    if reservation.table_id:
        _validate_table(
            table_id=reservation.table_id,
            reservation_date=reservation.reservation_date,
            reservation_time=reservation.reservation_time,
            number_of_guests=reservation.number_of_guests,
            exclude_id=reservation.id,
        )

    reservation.updated_by = updated_by
    reservation.save()
    return reservation


@transaction.atomic
def confirm_reservation(*, reservation_id: UUID, updated_by=None) -> Reservation:
    reservation = get_reservation(reservation_id=reservation_id, lock=True)
    _transition(reservation, (ReservationStatus.PENDING,), ReservationStatus.CONFIRMED)
    reservation.updated_by = updated_by
    reservation.save(update_fields=['status', 'updated_by', 'updated_at'])
    return reservation


@transaction.atomic
def check_in_reservation(*, reservation_id: UUID, table_id: UUID, updated_by=None) -> Reservation:
    """
    Mark the party as arrived at ``table_id``.

    Only pending or confirmed reservations can check in. The table is
    validated against capacity and other bookings and flagged reserved
    until the visit starts.
    """
    reservation = get_reservation(reservation_id=reservation_id, lock=True)
    _transition(
        reservation,
        (ReservationStatus.PENDING, ReservationStatus.CONFIRMED),
        ReservationStatus.CHECKED_IN,
    )
    table = _validate_table(
        table_id=table_id,
        reservation_date=reservation.reservation_date,
        reservation_time=reservation.reservation_time,
        number_of_guests=reservation.number_of_guests,
        exclude_id=reservation.id,
    )
    if table.current_status == TableStatus.OCCUPIED:
        raise TableNotAvailableError(f"Table {table.table_name} is occupied")

    reservation.table = table
    reservation.checked_in_at = timezone.now()
    reservation.updated_by = updated_by
    reservation.save()

    if table.current_status == TableStatus.AVAILABLE:
        table.current_status = TableStatus.RESERVED
        table.save(update_fields=['current_status', 'updated_at'])

    logger.info('Reservation %s checked in at table %s', reservation.id, table.table_name)
    return reservation


@transaction.atomic
def complete_reservation(*, reservation_id: UUID, updated_by=None) -> Reservation:
    reservation = get_reservation(reservation_id=reservation_id, lock=True)
    _transition(reservation, (ReservationStatus.CHECKED_IN,), ReservationStatus.COMPLETED)
    reservation.updated_by = updated_by
    reservation.save(update_fields=['status', 'updated_by', 'updated_at'])
    return reservation


@transaction.atomic
def cancel_reservation(*, reservation_id: UUID, reason: str, updated_by=None) -> Reservation:
    """
    Cancel a reservation with a reason.

    Completed or already cancelled reservations cannot be cancelled. A
    checked-in party's table is handed back unless a visit is running on it.
    """
    reservation = get_reservation(reservation_id=reservation_id, lock=True)
    was_checked_in = reservation.status == ReservationStatus.CHECKED_IN
    _transition(
        reservation,
        (
            ReservationStatus.PENDING,
            ReservationStatus.CONFIRMED,
            ReservationStatus.CHECKED_IN,
            ReservationStatus.NO_SHOW,
        ),
        ReservationStatus.CANCELLED,
    )
    reservation.cancel_reason = reason
    reservation.cancelled_at = timezone.now()
    reservation.updated_by = updated_by
    reservation.save()
    if was_checked_in:
        _release_table(reservation.table)
    logger.info('Reservation %s cancelled: %s', reservation.id, reason)
    return reservation


@transaction.atomic
def mark_no_show(*, reservation_id: UUID, updated_by=None) -> Reservation:
    reservation = get_reservation(reservation_id=reservation_id, lock=True)
    _transition(
        reservation,
        (ReservationStatus.PENDING, ReservationStatus.CONFIRMED),
        ReservationStatus.NO_SHOW,
    )
    reservation.updated_by = updated_by
    reservation.save(update_fields=['status', 'updated_by', 'updated_at'])
    logger.info('Reservation %s marked no-show', reservation.id)
    return reservation


def search_reservations(
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    customer_id: Optional[UUID] = None,
    table_id: Optional[UUID] = None,
    assigned_cast_id: Optional[UUID] = None,
) -> QuerySet:
    qs = Reservation.objects.select_related('customer', 'table', 'assigned_cast')
    if start_date:
        qs = qs.filter(reservation_date__gte=start_date)
    if end_date:
        qs = qs.filter(reservation_date__lte=end_date)
    if status:
        qs = qs.filter(status=status)
    if customer_id:
        qs = qs.filter(customer_id=customer_id)
    if table_id:
        qs = qs.filter(table_id=table_id)
    if assigned_cast_id:
        qs = qs.filter(assigned_cast_id=assigned_cast_id)
    return qs


def today_reservations() -> QuerySet:
    return search_reservations(
        start_date=timezone.localdate(), end_date=timezone.localdate()
    ).exclude(status=ReservationStatus.CANCELLED)
