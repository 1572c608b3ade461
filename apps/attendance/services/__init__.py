"""Services for attendance, shifts and QR clock-in."""

from .exceptions import (
    AttendanceServiceError,
    AttendanceRecordNotFoundError,
    InvalidClockActionError,
    ShiftRequestNotFoundError,
    InvalidShiftError,
    QRAttendanceError,
    QRCodeInvalidError,
    QRCodeExpiredError,
    LocationOutOfRangeError,
    DuplicateAttendanceError,
)
from .time_tracking import (
    clock_action,
    calculate_work_minutes,
    today_record,
    get_record,
    update_record,
    attendance_records,
    monthly_summary,
)
from .shifts import (
    submit_shift_request,
    approve_shift_request,
    reject_shift_request,
    shift_requests,
    create_confirmed_shift,
    confirmed_shifts,
    weekly_schedule,
)
from .qr_attendance import (
    sign,
    haversine_distance,
    generate_qr_code,
    validate_qr_code,
    record_qr_attendance,
    qr_stats,
    qr_history,
    active_qr_code,
)

__all__ = [
    # Exceptions
    'AttendanceServiceError',
    'AttendanceRecordNotFoundError',
    'InvalidClockActionError',
    'ShiftRequestNotFoundError',
    'InvalidShiftError',
    'QRAttendanceError',
    'QRCodeInvalidError',
    'QRCodeExpiredError',
    'LocationOutOfRangeError',
    'DuplicateAttendanceError',
    # Time tracking
    'clock_action',
    'calculate_work_minutes',
    'today_record',
    'get_record',
    'update_record',
    'attendance_records',
    'monthly_summary',
    # Shifts
    'submit_shift_request',
    'approve_shift_request',
    'reject_shift_request',
    'shift_requests',
    'create_confirmed_shift',
    'confirmed_shifts',
    'weekly_schedule',
    # QR
    'sign',
    'haversine_distance',
    'generate_qr_code',
    'validate_qr_code',
    'record_qr_attendance',
    'qr_stats',
    'qr_history',
    'active_qr_code',
]
