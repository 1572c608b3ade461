"""Shift requests from staff and the confirmed schedule."""

import logging
from datetime import date, time, timedelta
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from ..models import ConfirmedShift, ShiftRequest, ShiftRequestStatus, ShiftType
from .exceptions import InvalidShiftError, ShiftRequestNotFoundError

logger = logging.getLogger(__name__)


def _validate_times(shift_date: date, start_time: time, end_time: time) -> None:
    if shift_date < timezone.localdate():
        raise InvalidShiftError('Shift date must not be in the past')
    if end_time <= start_time:
        raise InvalidShiftError('End time must be after start time')


@transaction.atomic
def submit_shift_request(
    *,
    staff_id: UUID,
    request_date: date,
    start_time: time,
    end_time: time,
    notes: str = '',
) -> ShiftRequest:
    _validate_times(request_date, start_time, end_time)
    shift_request = ShiftRequest.objects.create(
        staff_id=staff_id,
        request_date=request_date,
        start_time=start_time,
        end_time=end_time,
        notes=notes,
    )
    logger.info('Shift request %s submitted by staff %s', shift_request.id, staff_id)
    return shift_request


def _pending_request(request_id: UUID) -> ShiftRequest:
    try:
        shift_request = ShiftRequest.objects.select_for_update().get(id=request_id)
    except ShiftRequest.DoesNotExist:
        raise ShiftRequestNotFoundError(f"Shift request {request_id} not found")
    if shift_request.status != ShiftRequestStatus.PENDING:
        raise InvalidShiftError(f"Shift request is already {shift_request.status}")
    return shift_request


@transaction.atomic
def approve_shift_request(*, request_id: UUID, reviewed_by=None) -> ConfirmedShift:
    """Approve a pending request and put it on the schedule."""
    shift_request = _pending_request(request_id)
    shift_request.status = ShiftRequestStatus.APPROVED
    shift_request.reviewed_by = reviewed_by
    shift_request.reviewed_at = timezone.now()
    shift_request.save()

    shift = create_confirmed_shift(
        staff_id=shift_request.staff_id,
        shift_date=shift_request.request_date,
        start_time=shift_request.start_time,
        end_time=shift_request.end_time,
        notes=shift_request.notes,
    )
    logger.info('Shift request %s approved', shift_request.id)
    return shift


@transaction.atomic
def reject_shift_request(*, request_id: UUID, reason: str, reviewed_by=None) -> ShiftRequest:
    if not reason or not reason.strip():
        raise InvalidShiftError('A rejection reason is required')

    shift_request = _pending_request(request_id)
    shift_request.status = ShiftRequestStatus.REJECTED
    shift_request.rejection_reason = reason.strip()
    shift_request.reviewed_by = reviewed_by
    shift_request.reviewed_at = timezone.now()
    shift_request.save()
    logger.info('Shift request %s rejected', shift_request.id)
    return shift_request


def shift_requests(
    *,
    staff_id: Optional[UUID] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    qs = ShiftRequest.objects.select_related('staff')
    if staff_id:
        qs = qs.filter(staff_id=staff_id)
    if status:
        qs = qs.filter(status=status)
    if start_date:
        qs = qs.filter(request_date__gte=start_date)
    if end_date:
        qs = qs.filter(request_date__lte=end_date)
    return qs


@transaction.atomic
def create_confirmed_shift(
    *,
    staff_id: UUID,
    shift_date: date,
    start_time: time,
    end_time: time,
    shift_type: str = ShiftType.REGULAR,
    notes: str = '',
) -> ConfirmedShift:
    """
    Raises:
        InvalidShiftError: If times are invalid or the staff member already has a shift that day
    """
    _validate_times(shift_date, start_time, end_time)
    try:
        with transaction.atomic():
            return ConfirmedShift.objects.create(
                staff_id=staff_id,
                shift_date=shift_date,
                start_time=start_time,
                end_time=end_time,
                shift_type=shift_type,
                notes=notes,
            )
    except IntegrityError:
        raise InvalidShiftError(f"Staff already has a shift on {shift_date}")


def confirmed_shifts(
    *,
    staff_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    qs = ConfirmedShift.objects.select_related('staff')
    if staff_id:
        qs = qs.filter(staff_id=staff_id)
    if start_date:
        qs = qs.filter(shift_date__gte=start_date)
    if end_date:
        qs = qs.filter(shift_date__lte=end_date)
    return qs


def weekly_schedule(*, week_start: date) -> list:
    """Seven days from ``week_start``, each with its confirmed shifts."""
    week_end = week_start + timedelta(days=6)
    shifts = list(confirmed_shifts(start_date=week_start, end_date=week_end))
    return [
        {
            'date': week_start + timedelta(days=offset),
            'shifts': [s for s in shifts if s.shift_date == week_start + timedelta(days=offset)],
        }
        for offset in range(7)
    ]
