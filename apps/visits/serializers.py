from rest_framework import serializers

from apps.casts.models import CastProfile
from apps.customers.models import Customer
from apps.payroll.models import NominationType
from apps.tables.models import Table
from .models import Visit, TableSegment, Nomination, NominationRole, VisitGuest, GuestType, VisitStatus


class TableSegmentSerializer(serializers.ModelSerializer):
    table_name = serializers.CharField(source='table.table_name', read_only=True)

    class Meta:
        model = TableSegment
        fields = ['id', 'table', 'table_name', 'started_at', 'ended_at', 'reason']
        read_only_fields = fields


class NominationSerializer(serializers.ModelSerializer):
    stage_name = serializers.CharField(source='cast.stage_name', read_only=True)
    nomination_type_name = serializers.CharField(
        source='nomination_type.display_name', read_only=True, default=None
    )

    class Meta:
        model = Nomination
        fields = [
            'id',
            'visit',
            'cast',
            'stage_name',
            'nomination_type',
            'nomination_type_name',
            'role',
            'fee_amount',
            'back_percentage',
            'started_at',
            'ended_at',
            'is_active',
        ]
        read_only_fields = fields


class VisitGuestSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)

    class Meta:
        model = VisitGuest
        fields = [
            'id',
            'visit',
            'customer',
            'customer_name',
            'guest_type',
            'seat_position',
            'is_primary_payer',
            'check_in_at',
            'check_out_at',
        ]
        read_only_fields = fields


class VisitSerializer(serializers.ModelSerializer):
    """Visit summary for lists and history."""

    customer_name = serializers.CharField(source='customer.name', read_only=True)
    table_name = serializers.CharField(source='table.table_name', read_only=True)

    class Meta:
        model = Visit
        fields = [
            'id',
            'session_code',
            'customer',
            'customer_name',
            'table',
            'table_name',
            'num_guests',
            'check_in_at',
            'check_out_at',
            'subtotal',
            'service_charge',
            'tax_amount',
            'total_amount',
            'payment_method',
            'payment_status',
            'status',
            'notes',
        ]
        read_only_fields = fields


class VisitDetailSerializer(VisitSerializer):
    """Visit with its table history, guests and cast engagements."""

    table_segments = TableSegmentSerializer(many=True, read_only=True)
    guests = VisitGuestSerializer(many=True, read_only=True)
    nominations = NominationSerializer(many=True, read_only=True)

    class Meta(VisitSerializer.Meta):
        fields = VisitSerializer.Meta.fields + ['table_segments', 'guests', 'nominations']
        read_only_fields = fields


class StartVisitSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    table = serializers.PrimaryKeyRelatedField(queryset=Table.objects.all())
    num_guests = serializers.IntegerField(min_value=1, max_value=50, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)

    def validate_customer(self, value):
        if value.status == 'blocked':
            raise serializers.ValidationError('Blocked customers cannot be seated.')
        return value


class MoveTableSerializer(serializers.Serializer):
    table = serializers.PrimaryKeyRelatedField(queryset=Table.objects.all())
    reason = serializers.CharField(max_length=100, default='move')


class CancelVisitSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True)


class AddNominationSerializer(serializers.Serializer):
    cast = serializers.PrimaryKeyRelatedField(queryset=CastProfile.objects.filter(is_active=True))
    role = serializers.ChoiceField(choices=NominationRole.choices, default=NominationRole.PRIMARY)
    nomination_type = serializers.PrimaryKeyRelatedField(
        queryset=NominationType.objects.filter(is_active=True),
        required=False,
        allow_null=True,
    )


class AddGuestSerializer(serializers.Serializer):
    """An existing customer, or a name (and phone) for a new one."""

    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    guest_type = serializers.ChoiceField(choices=GuestType.choices, default=GuestType.COMPANION)
    seat_position = serializers.IntegerField(min_value=1, max_value=50, required=False, allow_null=True)
    is_primary_payer = serializers.BooleanField(default=False)

    def validate(self, attrs):
        if not attrs.get('customer') and not attrs.get('name'):
            raise serializers.ValidationError('Either customer or name is required.')
        return attrs


class TransferGuestSerializer(serializers.Serializer):
    visit = serializers.PrimaryKeyRelatedField(queryset=Visit.objects.filter(status=VisitStatus.ACTIVE))
