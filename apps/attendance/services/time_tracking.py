"""Clock-in/out, breaks and attendance summaries."""

import calendar
import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from ..models import AttendanceRecord, AttendanceStatus, ClockAction, ConfirmedShift
from .exceptions import AttendanceRecordNotFoundError, InvalidClockActionError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'clock_in', 'clock_out', 'break_start', 'break_end',
    'scheduled_start', 'scheduled_end', 'status', 'notes',
)


def _today_record(staff_id: UUID, today: date) -> AttendanceRecord:
    """Lock today's record, creating it from the confirmed shift if needed."""
    record, created = AttendanceRecord.objects.select_for_update().get_or_create(
        staff_id=staff_id, attendance_date=today
    )
    if created:
        shift = ConfirmedShift.objects.filter(staff_id=staff_id, shift_date=today).first()
        if shift:
            record.scheduled_start = shift.start_time
            record.scheduled_end = shift.end_time
            record.save(update_fields=['scheduled_start', 'scheduled_end'])
    return record


@transaction.atomic
def clock_action(*, staff_id: UUID, action: str, at: Optional[datetime] = None) -> AttendanceRecord:
    """
    Apply a clock action to today's record.

    clock_in marks the day present, or late after the scheduled start.
    clock_out marks early_leave before the scheduled end and closes any
    open break.

    Raises:
        InvalidClockActionError: If the action is out of sequence
    """
    now = at or timezone.now()
    local_now = timezone.localtime(now)
    record = _today_record(staff_id, local_now.date())

    if action == ClockAction.CLOCK_IN:
        if record.clock_in:
            raise InvalidClockActionError('Already clocked in today')
        record.clock_in = now
        late = record.scheduled_start and local_now.time() > record.scheduled_start
        record.status = AttendanceStatus.LATE if late else AttendanceStatus.PRESENT

    elif action == ClockAction.CLOCK_OUT:
        if not record.clock_in:
            raise InvalidClockActionError('Not clocked in yet')
        if record.clock_out:
            raise InvalidClockActionError('Already clocked out today')
        if record.break_start and not record.break_end:
            record.break_end = now
        record.clock_out = now
        if record.scheduled_end and local_now.time() < record.scheduled_end:
            record.status = AttendanceStatus.EARLY_LEAVE

    elif action == ClockAction.BREAK_START:
        if not record.clock_in or record.clock_out:
            raise InvalidClockActionError('Breaks can only start while clocked in')
        if record.break_start:
            raise InvalidClockActionError('Break already taken today')
        record.break_start = now

    elif action == ClockAction.BREAK_END:
        if not record.break_start:
            raise InvalidClockActionError('No break in progress')
        if record.break_end:
            raise InvalidClockActionError('Break already ended')
        record.break_end = now

    else:
        raise InvalidClockActionError(f"Unknown clock action: {action}")

    record.save()
    logger.info('Staff %s %s at %s', staff_id, action, local_now.strftime('%H:%M'))
    return record


def calculate_work_minutes(record: AttendanceRecord) -> int:
    """Minutes between clock-in and clock-out less the break, never negative."""
    if not record.clock_in or not record.clock_out:
        return 0
    minutes = (record.clock_out - record.clock_in).total_seconds() // 60
    if record.break_start and record.break_end:
        minutes -= (record.break_end - record.break_start).total_seconds() // 60
    return max(int(minutes), 0)


def today_record(*, staff_id: UUID) -> Optional[AttendanceRecord]:
    return AttendanceRecord.objects.filter(
        staff_id=staff_id, attendance_date=timezone.localdate()
    ).first()


def get_record(*, record_id: UUID) -> AttendanceRecord:
    try:
        return AttendanceRecord.objects.select_related('staff').get(id=record_id)
    except AttendanceRecord.DoesNotExist:
        raise AttendanceRecordNotFoundError(f"Attendance record {record_id} not found")


@transaction.atomic
def update_record(*, record_id: UUID, **fields) -> AttendanceRecord:
    """Manual correction of a record by a manager."""
    record = get_record(record_id=record_id)
    for key, value in fields.items():
        if key in EDITABLE_FIELDS:
            setattr(record, key, value)
    record.save()
    logger.info('Attendance record %s corrected', record.id)
    return record


def attendance_records(
    *,
    staff_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
) -> QuerySet:
    qs = AttendanceRecord.objects.select_related('staff')
    if staff_id:
        qs = qs.filter(staff_id=staff_id)
    if start_date:
        qs = qs.filter(attendance_date__gte=start_date)
    if end_date:
        qs = qs.filter(attendance_date__lte=end_date)
    if status:
        qs = qs.filter(status=status)
    return qs


def monthly_summary(*, staff_id: UUID, year: int, month: int) -> dict:
    start = date(year, month, 1)
    end = date(year, month, calendar.monthrange(year, month)[1])
    records = list(attendance_records(staff_id=staff_id, start_date=start, end_date=end))

    worked = [r for r in records if r.clock_in]
    total_minutes = sum(calculate_work_minutes(r) for r in records)

    return {
        'staff_id': staff_id,
        'year': year,
        'month': month,
        'working_days': len(worked),
        'present_days': sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
        'late_days': sum(1 for r in records if r.status == AttendanceStatus.LATE),
        'early_leave_days': sum(1 for r in records if r.status == AttendanceStatus.EARLY_LEAVE),
        'absent_days': sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
        'total_work_minutes': total_minutes,
        'average_work_minutes': total_minutes // len(worked) if worked else 0,
    }
