from rest_framework import serializers

from apps.staff.models import Staff
from .models import CastProfile, CastPerformance


class CastProfileSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='staff.full_name', read_only=True)

    class Meta:
        model = CastProfile
        fields = [
            'id',
            'staff',
            'full_name',
            'stage_name',
            'birthday',
            'blood_type',
            'height',
            'three_size',
            'hobby',
            'special_skill',
            'self_introduction',
            'profile_image_url',
            'hourly_rate',
            'back_percentage',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CastOwnProfileSerializer(serializers.Serializer):
    """Fields a cast member may edit on their own profile."""

    stage_name = serializers.CharField(min_length=1, max_length=50, required=False)
    birthday = serializers.DateField(required=False, allow_null=True)
    blood_type = serializers.ChoiceField(choices=['A', 'B', 'O', 'AB'], required=False, allow_blank=True)
    height = serializers.IntegerField(min_value=100, max_value=250, required=False, allow_null=True)
    three_size = serializers.CharField(max_length=20, required=False, allow_blank=True)
    hobby = serializers.CharField(max_length=200, required=False, allow_blank=True)
    special_skill = serializers.CharField(max_length=200, required=False, allow_blank=True)
    self_introduction = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    profile_image_url = serializers.URLField(required=False, allow_blank=True)


class CastInputSerializer(CastOwnProfileSerializer):
    """Management payload: profile fields plus pay terms."""

    staff = serializers.PrimaryKeyRelatedField(queryset=Staff.objects.all(), required=False)
    stage_name = serializers.CharField(min_length=1, max_length=50)
    hourly_rate = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0, required=False)
    back_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )
    is_active = serializers.BooleanField(required=False)


class CastPerformanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = CastPerformance
        fields = [
            'id',
            'cast',
            'date',
            'shimei_count',
            'dohan_count',
            'sales_amount',
            'drink_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PerformanceInputSerializer(serializers.Serializer):
    date = serializers.DateField()
    shimei_count = serializers.IntegerField(min_value=0, default=0)
    dohan_count = serializers.IntegerField(min_value=0, default=0)
    sales_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    drink_count = serializers.IntegerField(min_value=0, default=0)


class PeriodQuerySerializer(serializers.Serializer):
    """Validate start_date/end_date query parameters."""

    start_date = serializers.DateField()
    end_date = serializers.DateField()
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError({'end_date': 'end_date must be on or after start_date'})
        return attrs


class CastRankingSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    cast_id = serializers.CharField()
    stage_name = serializers.CharField()
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_shimei = serializers.IntegerField()
    total_dohan = serializers.IntegerField()
    total_drinks = serializers.IntegerField()
    days_worked = serializers.IntegerField()


class CompensationSerializer(serializers.Serializer):
    cast_id = serializers.CharField()
    stage_name = serializers.CharField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()
    work_days = serializers.IntegerField()
    work_hours = serializers.IntegerField()
    hourly_rate = serializers.DecimalField(max_digits=8, decimal_places=2)
    hourly_wage = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    back_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    back_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    shimei_count = serializers.IntegerField()
    dohan_count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class HistoryQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
