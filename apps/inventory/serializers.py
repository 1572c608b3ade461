from rest_framework import serializers

from .models import Product, InventoryMovement, MovementType


class ProductSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)
    is_out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'category',
            'price',
            'cost',
            'stock_quantity',
            'low_stock_threshold',
            'reorder_point',
            'max_stock',
            'is_active',
            'is_low_stock',
            'is_out_of_stock',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProductInputSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=100)
    category = serializers.CharField(min_length=1, max_length=50)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    stock_quantity = serializers.IntegerField(min_value=0, required=False)
    low_stock_threshold = serializers.IntegerField(min_value=0, required=False)
    reorder_point = serializers.IntegerField(min_value=0, required=False)
    max_stock = serializers.IntegerField(min_value=0, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        low = attrs.get('low_stock_threshold')
        high = attrs.get('max_stock')
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError(
                {'low_stock_threshold': 'Must not exceed max_stock'}
            )
        return attrs


class ProductFilterSerializer(serializers.Serializer):
    query = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False)
    is_active = serializers.BooleanField(required=False, allow_null=True)
    low_stock = serializers.BooleanField(required=False, allow_null=True)
    out_of_stock = serializers.BooleanField(required=False, allow_null=True)


class InventoryMovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = InventoryMovement
        fields = [
            'id',
            'product',
            'product_name',
            'movement_type',
            'quantity',
            'unit_cost',
            'reason',
            'reference_id',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class MovementInputSerializer(serializers.Serializer):
    movement_type = serializers.ChoiceField(choices=MovementType.choices)
    quantity = serializers.IntegerField(min_value=0)
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True)
    reference_id = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs['movement_type'] != MovementType.ADJUSTMENT and attrs['quantity'] == 0:
            raise serializers.ValidationError({'quantity': 'Must be at least 1'})
        return attrs


class BulkMovementRowSerializer(MovementInputSerializer):
    product_id = serializers.UUIDField()


class BulkMovementSerializer(serializers.Serializer):
    movements = BulkMovementRowSerializer(many=True, allow_empty=False)


class BulkDeleteSerializer(serializers.Serializer):
    product_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class BulkResultSerializer(serializers.Serializer):
    succeeded = serializers.ListField(child=serializers.CharField())
    failed = serializers.ListField(child=serializers.DictField())


class PeriodQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError({'end_date': 'end_date must be on or after start_date'})
        return attrs


class MovementFilterSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class InventoryAlertSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_name = serializers.CharField()
    current_stock = serializers.IntegerField()
    threshold = serializers.IntegerField()
    alert_type = serializers.CharField()
    severity = serializers.CharField()


class ReorderSuggestionSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_name = serializers.CharField()
    current_stock = serializers.IntegerField()
    reorder_point = serializers.IntegerField()
    suggested_quantity = serializers.IntegerField()
    estimated_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
    priority = serializers.CharField()


class ProductReportSerializer(serializers.Serializer):
    product = ProductSerializer()
    current_stock = serializers.IntegerField()
    movements = InventoryMovementSerializer(many=True)
    last_movement = InventoryMovementSerializer(allow_null=True)
    is_low_stock = serializers.BooleanField()
    is_out_of_stock = serializers.BooleanField()
    estimated_value = serializers.DecimalField(max_digits=14, decimal_places=2)


class InventoryStatsSerializer(serializers.Serializer):
    total_products = serializers.IntegerField()
    low_stock_items = serializers.IntegerField()
    out_of_stock_items = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
