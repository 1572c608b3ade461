from rest_framework import serializers

from apps.accounts.validators import validate_not_past
from apps.casts.models import CastProfile
from apps.customers.models import Customer
from apps.tables.models import Table
from .models import Reservation, ReservationStatus

TIME_FORMAT = '%H:%M'


class ReservationSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    table_name = serializers.CharField(source='table.table_name', read_only=True, default=None)
    cast_name = serializers.CharField(source='assigned_cast.stage_name', read_only=True, default=None)
    reservation_time = serializers.TimeField(format=TIME_FORMAT)

    class Meta:
        model = Reservation
        fields = [
            'id',
            'customer',
            'customer_name',
            'table',
            'table_name',
            'reservation_date',
            'reservation_time',
            'number_of_guests',
            'assigned_cast',
            'cast_name',
            'special_requests',
            'status',
            'cancel_reason',
            'checked_in_at',
            'cancelled_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ReservationInputSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    table = serializers.PrimaryKeyRelatedField(queryset=Table.objects.all(), required=False, allow_null=True)
    reservation_date = serializers.DateField(validators=[validate_not_past])
    reservation_time = serializers.TimeField(format=TIME_FORMAT, input_formats=[TIME_FORMAT])
    number_of_guests = serializers.IntegerField(min_value=1, max_value=20)
    assigned_cast = serializers.PrimaryKeyRelatedField(
        queryset=CastProfile.objects.filter(is_active=True), required=False, allow_null=True
    )
    special_requests = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def to_service_kwargs(self) -> dict:
        """Flatten related objects into *_id keyword arguments."""
        kwargs = {}
        for key, value in self.validated_data.items():
            if key in ('customer', 'table', 'assigned_cast'):
                kwargs[f'{key}_id'] = value.id if value else None
            else:
                kwargs[key] = value
        return kwargs


class ReservationFilterSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=ReservationStatus.choices, required=False)
    customer_id = serializers.UUIDField(required=False)
    table_id = serializers.UUIDField(required=False)
    assigned_cast_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'end_date': 'end_date must be on or after start_date'})
        return attrs


class CheckInSerializer(serializers.Serializer):
    table = serializers.PrimaryKeyRelatedField(queryset=Table.objects.all())


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(min_length=1, max_length=200)


class AvailabilityQuerySerializer(serializers.Serializer):
    table_id = serializers.UUIDField()
    date = serializers.DateField()
    time = serializers.TimeField(input_formats=[TIME_FORMAT])
    exclude_id = serializers.UUIDField(required=False)
