"""Slot conflict rules for table reservations."""

from datetime import date, time, timedelta
from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from ..models import Reservation, BLOCKING_STATUSES

CONFLICT_WINDOW = timedelta(hours=2)


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def conflicting_reservations(
    *,
    table_id: UUID,
    reservation_date: date,
    reservation_time: time,
    exclude_id: Optional[UUID] = None,
) -> QuerySet:
    """
    Reservations on the same table and day that overlap the slot.

    A reservation blocks the table for two hours either side of its start
    time while it is pending, confirmed or checked in.
    """
    window = int(CONFLICT_WINDOW.total_seconds() // 60)
    start = _minutes(reservation_time) - window
    end = _minutes(reservation_time) + window

    qs = Reservation.objects.filter(
        table_id=table_id,
        reservation_date=reservation_date,
        status__in=BLOCKING_STATUSES,
    )
    if exclude_id:
        qs = qs.exclude(id=exclude_id)

    clashing = [
        r.id for r in qs.only('id', 'reservation_time')
        if start < _minutes(r.reservation_time) < end
    ]
    return Reservation.objects.filter(id__in=clashing)


def check_availability(
    *,
    table_id: UUID,
    reservation_date: date,
    reservation_time: time,
    exclude_id: Optional[UUID] = None,
) -> bool:
    return not conflicting_reservations(
        table_id=table_id,
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        exclude_id=exclude_id,
    ).exists()

