from rest_framework import serializers

from apps.accounts.validators import validate_not_past
from apps.staff.models import Staff
from .models import (
    AttendanceRecord,
    AttendanceStatus,
    ClockAction,
    ConfirmedShift,
    QRAttendanceLog,
    QRCode,
    ShiftRequest,
    ShiftRequestStatus,
    ShiftType,
)
from .services import calculate_work_minutes

TIME_FORMAT = '%H:%M'


class AttendanceRecordSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source='staff.full_name', read_only=True)
    work_minutes = serializers.SerializerMethodField()

    class Meta:
        model = AttendanceRecord
        fields = [
            'id',
            'staff',
            'staff_name',
            'attendance_date',
            'clock_in',
            'clock_out',
            'break_start',
            'break_end',
            'scheduled_start',
            'scheduled_end',
            'status',
            'notes',
            'work_minutes',
        ]
        read_only_fields = fields

    def get_work_minutes(self, obj) -> int:
        return calculate_work_minutes(obj)


class AttendanceCorrectionSerializer(serializers.Serializer):
    clock_in = serializers.DateTimeField(required=False, allow_null=True)
    clock_out = serializers.DateTimeField(required=False, allow_null=True)
    break_start = serializers.DateTimeField(required=False, allow_null=True)
    break_end = serializers.DateTimeField(required=False, allow_null=True)
    scheduled_start = serializers.TimeField(required=False, allow_null=True)
    scheduled_end = serializers.TimeField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=AttendanceStatus.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        clock_in, clock_out = attrs.get('clock_in'), attrs.get('clock_out')
        if clock_in and clock_out and clock_out <= clock_in:
            raise serializers.ValidationError({'clock_out': 'Must be after clock_in'})
        return attrs


class AttendanceFilterSerializer(serializers.Serializer):
    staff_id = serializers.UUIDField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=AttendanceStatus.choices, required=False)


class ClockActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=ClockAction.choices)


class MonthlySummaryQuerySerializer(serializers.Serializer):
    staff_id = serializers.UUIDField(required=False)
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class MonthlySummarySerializer(serializers.Serializer):
    staff_id = serializers.UUIDField()
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    working_days = serializers.IntegerField()
    present_days = serializers.IntegerField()
    late_days = serializers.IntegerField()
    early_leave_days = serializers.IntegerField()
    absent_days = serializers.IntegerField()
    total_work_minutes = serializers.IntegerField()
    average_work_minutes = serializers.IntegerField()


class ShiftRequestSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source='staff.full_name', read_only=True)
    start_time = serializers.TimeField(format=TIME_FORMAT)
    end_time = serializers.TimeField(format=TIME_FORMAT)

    class Meta:
        model = ShiftRequest
        fields = [
            'id',
            'staff',
            'staff_name',
            'request_date',
            'start_time',
            'end_time',
            'notes',
            'status',
            'rejection_reason',
            'reviewed_by',
            'reviewed_at',
            'created_at',
        ]
        read_only_fields = fields


class ShiftTimesMixin(serializers.Serializer):
    start_time = serializers.TimeField(input_formats=[TIME_FORMAT])
    end_time = serializers.TimeField(input_formats=[TIME_FORMAT])

    def validate(self, attrs):
        if attrs['end_time'] <= attrs['start_time']:
            raise serializers.ValidationError({'end_time': 'Must be after start_time'})
        return attrs


class ShiftRequestInputSerializer(ShiftTimesMixin):
    request_date = serializers.DateField(validators=[validate_not_past])
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ShiftRequestFilterSerializer(serializers.Serializer):
    staff_id = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=ShiftRequestStatus.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class RejectShiftSerializer(serializers.Serializer):
    reason = serializers.CharField(min_length=1, max_length=200)


class ConfirmedShiftSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source='staff.full_name', read_only=True)
    start_time = serializers.TimeField(format=TIME_FORMAT)
    end_time = serializers.TimeField(format=TIME_FORMAT)

    class Meta:
        model = ConfirmedShift
        fields = [
            'id',
            'staff',
            'staff_name',
            'shift_date',
            'start_time',
            'end_time',
            'shift_type',
            'notes',
        ]
        read_only_fields = fields


class ConfirmedShiftInputSerializer(ShiftTimesMixin):
    staff = serializers.PrimaryKeyRelatedField(queryset=Staff.objects.filter(is_active=True))
    shift_date = serializers.DateField(validators=[validate_not_past])
    shift_type = serializers.ChoiceField(choices=ShiftType.choices, required=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ShiftFilterSerializer(serializers.Serializer):
    staff_id = serializers.UUIDField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class WeekQuerySerializer(serializers.Serializer):
    week_start = serializers.DateField(required=False)


class ScheduleDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    shifts = ConfirmedShiftSerializer(many=True)


class QRCodeSerializer(serializers.ModelSerializer):
    class Meta:
        model = QRCode
        fields = ['id', 'staff', 'qr_data', 'signature', 'expires_at', 'is_active', 'created_at']
        read_only_fields = fields


class GenerateQRSerializer(serializers.Serializer):
    staff = serializers.PrimaryKeyRelatedField(queryset=Staff.objects.filter(is_active=True), required=False)
    expires_in_minutes = serializers.IntegerField(min_value=1, max_value=24 * 60, required=False)


class LocationSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    accuracy = serializers.FloatField(required=False)


class QRScanSerializer(serializers.Serializer):
    qr_data = serializers.CharField()
    signature = serializers.CharField(max_length=64)
    action = serializers.ChoiceField(choices=ClockAction.choices)
    location = LocationSerializer(required=False, allow_null=True)
    device_info = serializers.DictField(required=False, allow_null=True)


class QRAttendanceLogSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source='staff.full_name', read_only=True, default=None)

    class Meta:
        model = QRAttendanceLog
        fields = [
            'id',
            'staff',
            'staff_name',
            'qr_code',
            'action_type',
            'location_data',
            'device_info',
            'success',
            'error_message',
            'created_at',
        ]
        read_only_fields = fields


class QRHistoryFilterSerializer(serializers.Serializer):
    staff_id = serializers.UUIDField(required=False)
    success = serializers.BooleanField(required=False, allow_null=True)


class QRStatsSerializer(serializers.Serializer):
    today_scans = serializers.IntegerField()
    successful_scans = serializers.IntegerField()
    failed_scans = serializers.IntegerField()
    active_codes = serializers.IntegerField()
    active_staff = serializers.IntegerField()
