from django.conf import settings
from django.db import models
import uuid


class AttendanceStatus(models.TextChoices):
    PRESENT = 'present', 'Present'
    ABSENT = 'absent', 'Absent'
    LATE = 'late', 'Late'
    EARLY_LEAVE = 'early_leave', 'Early leave'


class ClockAction(models.TextChoices):
    CLOCK_IN = 'clock_in', 'Clock in'
    CLOCK_OUT = 'clock_out', 'Clock out'
    BREAK_START = 'break_start', 'Break start'
    BREAK_END = 'break_end', 'Break end'


class AttendanceRecord(models.Model):
    """One staff member's working day."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    staff = models.ForeignKey('staff.Staff', on_delete=models.CASCADE, related_name='attendance_records')
    attendance_date = models.DateField(db_index=True)
    clock_in = models.DateTimeField(null=True, blank=True)
    clock_out = models.DateTimeField(null=True, blank=True)
    break_start = models.DateTimeField(null=True, blank=True)
    break_end = models.DateTimeField(null=True, blank=True)
    scheduled_start = models.TimeField(null=True, blank=True)
    scheduled_end = models.TimeField(null=True, blank=True)
    status = models.CharField(
        max_length=12, choices=AttendanceStatus.choices, default=AttendanceStatus.PRESENT
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'attendance_records'
        ordering = ['-attendance_date']
        constraints = [
            models.UniqueConstraint(fields=['staff', 'attendance_date'], name='unique_staff_attendance_date'),
        ]

    def __str__(self):
        return f"{self.staff} {self.attendance_date}"


class ShiftRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class ShiftRequest(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    staff = models.ForeignKey('staff.Staff', on_delete=models.CASCADE, related_name='shift_requests')
    request_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=10, choices=ShiftRequestStatus.choices, default=ShiftRequestStatus.PENDING, db_index=True
    )
    rejection_reason = models.CharField(max_length=200, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shift_requests'
        ordering = ['request_date', 'start_time']


class ShiftType(models.TextChoices):
    REGULAR = 'regular', 'Regular'
    OVERTIME = 'overtime', 'Overtime'
    HOLIDAY = 'holiday', 'Holiday'


class ConfirmedShift(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    staff = models.ForeignKey('staff.Staff', on_delete=models.CASCADE, related_name='confirmed_shifts')
    shift_date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    shift_type = models.CharField(max_length=10, choices=ShiftType.choices, default=ShiftType.REGULAR)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'confirmed_shifts'
        ordering = ['shift_date', 'start_time']
        constraints = [
            models.UniqueConstraint(fields=['staff', 'shift_date'], name='unique_staff_shift_date'),
        ]


class QRCode(models.Model):
    """Signed, expiring clock-in code issued to one staff member."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    staff = models.ForeignKey('staff.Staff', on_delete=models.CASCADE, related_name='qr_codes')
    qr_data = models.TextField(unique=True)
    signature = models.CharField(max_length=64)
    expires_at = models.DateTimeField()
    is_active = models.BooleanField(default=True, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'qr_codes'
        ordering = ['-created_at']


class QRAttendanceLog(models.Model):
    """Every QR scan attempt, successful or not."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    staff = models.ForeignKey(
        'staff.Staff', on_delete=models.CASCADE, null=True, blank=True, related_name='qr_attendance_logs'
    )
    qr_code = models.ForeignKey(QRCode, on_delete=models.SET_NULL, null=True, blank=True, related_name='logs')
    action_type = models.CharField(max_length=12, choices=ClockAction.choices)
    location_data = models.JSONField(null=True, blank=True)
    device_info = models.JSONField(null=True, blank=True)
    success = models.BooleanField(default=False)
    error_message = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'qr_attendance_logs'
        ordering = ['-created_at']
