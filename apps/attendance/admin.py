from django.contrib import admin

from .models import AttendanceRecord, ConfirmedShift, QRAttendanceLog, QRCode, ShiftRequest


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ['staff', 'attendance_date', 'clock_in', 'clock_out', 'status']
    list_filter = ['status', 'attendance_date']
    search_fields = ['staff__full_name']
    raw_id_fields = ['staff']
    date_hierarchy = 'attendance_date'


@admin.register(ShiftRequest)
class ShiftRequestAdmin(admin.ModelAdmin):
    list_display = ['staff', 'request_date', 'start_time', 'end_time', 'status']
    list_filter = ['status']
    raw_id_fields = ['staff', 'reviewed_by']


@admin.register(ConfirmedShift)
class ConfirmedShiftAdmin(admin.ModelAdmin):
    list_display = ['staff', 'shift_date', 'start_time', 'end_time', 'shift_type']
    list_filter = ['shift_type']
    raw_id_fields = ['staff']


@admin.register(QRCode)
class QRCodeAdmin(admin.ModelAdmin):
    list_display = ['staff', 'expires_at', 'is_active', 'created_at']
    list_filter = ['is_active']
    raw_id_fields = ['staff', 'created_by']


@admin.register(QRAttendanceLog)
class QRAttendanceLogAdmin(admin.ModelAdmin):
    list_display = ['staff', 'action_type', 'success', 'created_at']
    list_filter = ['success', 'action_type']
    readonly_fields = ['location_data', 'device_info']
