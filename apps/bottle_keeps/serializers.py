from decimal import Decimal

from rest_framework import serializers

from apps.customers.models import Customer
from apps.inventory.models import Product
from apps.staff.models import Staff
from .models import BottleKeep, BottleKeepUsage, BottleKeepMovement, BottleStatus


class BottleKeepUsageSerializer(serializers.ModelSerializer):
    class Meta:
        model = BottleKeepUsage
        fields = ['id', 'visit', 'served_amount', 'served_by', 'notes', 'created_at']
        read_only_fields = fields


class BottleKeepMovementSerializer(serializers.ModelSerializer):
    class Meta:
        model = BottleKeepMovement
        fields = ['id', 'from_location', 'to_location', 'reason', 'moved_by', 'created_at']
        read_only_fields = fields


class BottleKeepSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_price = serializers.DecimalField(
        source='product.price', max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = BottleKeep
        fields = [
            'id',
            'bottle_number',
            'customer',
            'customer_name',
            'product',
            'product_name',
            'product_price',
            'opened_date',
            'expiry_date',
            'remaining_percentage',
            'status',
            'storage_location',
            'table_number',
            'host_staff',
            'notes',
            'tags',
            'last_served_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class BottleKeepDetailSerializer(BottleKeepSerializer):
    usages = BottleKeepUsageSerializer(many=True, read_only=True)
    movements = BottleKeepMovementSerializer(many=True, read_only=True)

    class Meta(BottleKeepSerializer.Meta):
        fields = BottleKeepSerializer.Meta.fields + ['usages', 'movements']
        read_only_fields = fields


class BottleKeepInputSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    bottle_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    opened_date = serializers.DateField(required=False)
    expiry_date = serializers.DateField(required=False)
    remaining_percentage = serializers.DecimalField(
        max_digits=4, decimal_places=3, min_value=Decimal('0'), max_value=Decimal('1'), required=False
    )
    status = serializers.ChoiceField(choices=BottleStatus.choices, required=False)
    storage_location = serializers.CharField(max_length=50, required=False, allow_blank=True)
    table_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    host_staff = serializers.PrimaryKeyRelatedField(
        queryset=Staff.objects.filter(is_active=True), required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True)
    tags = serializers.ListField(child=serializers.CharField(max_length=30), required=False)

    def validate(self, attrs):
        opened, expiry = attrs.get('opened_date'), attrs.get('expiry_date')
        if opened and expiry and expiry < opened:
            raise serializers.ValidationError({'expiry_date': 'Must be on or after opened_date'})
        return attrs

    def to_service_kwargs(self) -> dict:
        kwargs = {}
        for key, value in self.validated_data.items():
            if key in ('customer', 'product', 'host_staff'):
                kwargs[f'{key}_id'] = value.id if value else None
            else:
                kwargs[key] = value
        return kwargs


class BottleKeepFilterSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField(required=False)
    product_id = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=BottleStatus.choices, required=False)
    storage_location = serializers.CharField(required=False)
    expiring_within = serializers.IntegerField(min_value=0, required=False)
    low_amount = serializers.BooleanField(required=False, allow_null=True)
    query = serializers.CharField(required=False, allow_blank=True)


class ServeBottleSerializer(serializers.Serializer):
    served_amount = serializers.DecimalField(
        max_digits=4, decimal_places=3, min_value=Decimal('0.001'), max_value=Decimal('1')
    )
    visit_id = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=200, required=False, allow_blank=True)


class MoveBottleSerializer(serializers.Serializer):
    to_location = serializers.CharField(min_length=1, max_length=50)
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True)


class CustomerQuerySerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()


class BottleKeepStatsSerializer(serializers.Serializer):
    total_bottles = serializers.IntegerField()
    active_bottles = serializers.IntegerField()
    expired_bottles = serializers.IntegerField()
    consumed_bottles = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    expiring_soon = serializers.IntegerField()


class BottleKeepAlertSerializer(serializers.Serializer):
    bottle_keep_id = serializers.UUIDField()
    bottle_number = serializers.CharField()
    customer_name = serializers.CharField()
    product_name = serializers.CharField()
    alert_type = serializers.CharField()
    severity = serializers.CharField()
    message = serializers.CharField()
    days_until_expiry = serializers.IntegerField()


class CustomerSummarySerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    customer_name = serializers.CharField(allow_null=True)
    total_bottles = serializers.IntegerField()
    active_bottles = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    bottles = BottleKeepSerializer(many=True)


class ExpiryManagementSerializer(serializers.Serializer):
    expiring_today = BottleKeepSerializer(many=True)
    expiring_this_week = BottleKeepSerializer(many=True)
    expiring_this_month = BottleKeepSerializer(many=True)
    expired = BottleKeepSerializer(many=True)


class LocationInventorySerializer(serializers.Serializer):
    storage_location = serializers.CharField()
    total_bottles = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    bottles = BottleKeepSerializer(many=True)
