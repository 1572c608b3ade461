from decimal import Decimal

from rest_framework import serializers

from apps.casts.models import CastProfile
from apps.inventory.models import Product
from apps.visits.models import PaymentMethod
from .models import OrderItem, GuestOrder, DailyClosing


class GuestOrderSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='guest.customer.name', read_only=True)

    class Meta:
        model = GuestOrder
        fields = ['id', 'order_item', 'guest', 'customer_name', 'share_percentage', 'amount']
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    cast_name = serializers.CharField(source='cast.stage_name', read_only=True, default=None)
    guest_shares = GuestOrderSerializer(many=True, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id',
            'visit',
            'product',
            'product_name',
            'cast',
            'cast_name',
            'quantity',
            'unit_price',
            'total_price',
            'notes',
            'guest_shares',
            'created_at',
        ]
        read_only_fields = fields


class OrderItemCreateSerializer(serializers.Serializer):
    visit_id = serializers.UUIDField()
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.filter(is_active=True))
    quantity = serializers.IntegerField(min_value=1, max_value=999)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    cast = serializers.PrimaryKeyRelatedField(
        queryset=CastProfile.objects.filter(is_active=True), required=False, allow_null=True
    )
    notes = serializers.CharField(max_length=200, required=False, allow_blank=True)


class OrderItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, max_value=999, required=False)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    notes = serializers.CharField(max_length=200, required=False, allow_blank=True)


class OrderItemFilterSerializer(serializers.Serializer):
    visit_id = serializers.UUIDField()


class BillSerializer(serializers.Serializer):
    visit_id = serializers.UUIDField()
    items_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    nomination_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    service_charge = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class PaymentSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class DateQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class TopProductSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class TopCastSerializer(serializers.Serializer):
    cast_id = serializers.UUIDField()
    cast_name = serializers.CharField()
    order_count = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class DailyReportSerializer(serializers.Serializer):
    date = serializers.DateField()
    total_visits = serializers.IntegerField()
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_cash = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_card = serializers.DecimalField(max_digits=14, decimal_places=2)
    top_products = TopProductSerializer(many=True)
    top_casts = TopCastSerializer(many=True)


class DailyClosingSerializer(serializers.ModelSerializer):
    class Meta:
        model = DailyClosing
        fields = [
            'id',
            'closing_date',
            'total_visits',
            'total_sales',
            'total_cash',
            'total_card',
            'closed_by',
            'closed_at',
        ]
        read_only_fields = fields


class GuestShareSerializer(serializers.Serializer):
    guest = serializers.UUIDField()
    percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0.01'), max_value=100)


class SplitOrderItemSerializer(serializers.Serializer):
    shares = GuestShareSerializer(many=True, allow_empty=False)


class GuestBillSerializer(serializers.Serializer):
    guest_id = serializers.UUIDField()
    customer_id = serializers.UUIDField()
    customer_name = serializers.CharField()
    is_primary_payer = serializers.BooleanField()
    items_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    carried_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    service_charge = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class SplitBillSerializer(serializers.Serializer):
    visit_id = serializers.UUIDField()
    guests = GuestBillSerializer(many=True)
    unassigned_total = serializers.DecimalField(max_digits=12, decimal_places=2)
