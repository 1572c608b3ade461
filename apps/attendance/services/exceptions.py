"""Domain-specific exceptions for attendance services."""


class AttendanceServiceError(Exception):
    """Base exception for attendance services."""
    pass


class AttendanceRecordNotFoundError(AttendanceServiceError):
    """Raised when attendance record does not exist."""
    pass


class InvalidClockActionError(AttendanceServiceError):
    """Raised when a clock action does not fit the day's record."""
    pass


class ShiftRequestNotFoundError(AttendanceServiceError):
    """Raised when shift request does not exist."""
    pass


class InvalidShiftError(AttendanceServiceError):
    """Raised when shift dates or times are invalid or the request was already reviewed."""
    pass


class QRAttendanceError(AttendanceServiceError):
    """Base exception for QR clock-in failures."""
    pass


class QRCodeInvalidError(QRAttendanceError):
    """Raised when a QR code is unknown, inactive or badly signed."""
    pass


class QRCodeExpiredError(QRAttendanceError):
    """Raised when a QR code is past its expiry."""
    pass


class LocationOutOfRangeError(QRAttendanceError):
    """Raised when the scan happened too far from the venue."""
    pass


class DuplicateAttendanceError(QRAttendanceError):
    """Raised when the same action was already recorded today."""
    pass
