from rest_framework import serializers

from apps.casts.models import CastProfile
from .models import (
    PayrollRule,
    SalesTier,
    NominationType,
    PayrollRuleAssignment,
    PayrollCalculation,
    PayrollCalculationDetail,
    CalculationStatus,
)


class SalesTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalesTier
        fields = ['id', 'min_sales', 'max_sales', 'back_percentage']
        read_only_fields = ['id']

    def validate(self, attrs):
        if attrs.get('max_sales') is not None and attrs['max_sales'] <= attrs['min_sales']:
            raise serializers.ValidationError({'max_sales': 'Must be greater than min_sales'})
        return attrs


class PayrollRuleSerializer(serializers.ModelSerializer):
    sales_tiers = SalesTierSerializer(many=True, read_only=True)

    class Meta:
        model = PayrollRule
        fields = [
            'id',
            'rule_name',
            'description',
            'base_hourly_rate',
            'base_back_percentage',
            'is_active',
            'effective_from',
            'effective_until',
            'sales_tiers',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PayrollRuleInputSerializer(serializers.Serializer):
    rule_name = serializers.CharField(min_length=1, max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    base_hourly_rate = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    base_back_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )
    is_active = serializers.BooleanField(required=False)
    effective_from = serializers.DateField()
    effective_until = serializers.DateField(required=False, allow_null=True)
    tiers = SalesTierSerializer(many=True, required=False)

    def validate(self, attrs):
        start, end = attrs.get('effective_from'), attrs.get('effective_until')
        if start and end and end < start:
            raise serializers.ValidationError({'effective_until': 'Must be on or after effective_from'})
        return attrs


class NominationTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = NominationType
        fields = [
            'id',
            'type_name',
            'display_name',
            'price',
            'back_percentage',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class NominationTypeInputSerializer(serializers.Serializer):
    type_name = serializers.SlugField(max_length=50)
    display_name = serializers.CharField(min_length=1, max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    back_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )
    is_active = serializers.BooleanField(required=False)


class AssignmentSerializer(serializers.ModelSerializer):
    rule_name = serializers.CharField(source='rule.rule_name', read_only=True)
    stage_name = serializers.CharField(source='cast.stage_name', read_only=True)

    class Meta:
        model = PayrollRuleAssignment
        fields = [
            'id',
            'cast',
            'stage_name',
            'rule',
            'rule_name',
            'assigned_from',
            'assigned_until',
            'is_active',
            'created_at',
        ]
        read_only_fields = fields


class AssignmentInputSerializer(serializers.Serializer):
    cast = serializers.PrimaryKeyRelatedField(queryset=CastProfile.objects.all())
    rule = serializers.PrimaryKeyRelatedField(queryset=PayrollRule.objects.filter(is_active=True))
    assigned_from = serializers.DateField()
    assigned_until = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get('assigned_until') and attrs['assigned_until'] < attrs['assigned_from']:
            raise serializers.ValidationError({'assigned_until': 'Must be on or after assigned_from'})
        return attrs


class CalculationDetailSerializer(serializers.ModelSerializer):
    class Meta:
        model = PayrollCalculationDetail
        fields = ['id', 'item_type', 'description', 'quantity', 'rate', 'amount']
        read_only_fields = fields


class PayrollCalculationSerializer(serializers.ModelSerializer):
    stage_name = serializers.CharField(source='cast.stage_name', read_only=True)
    details = CalculationDetailSerializer(many=True, read_only=True)

    class Meta:
        model = PayrollCalculation
        fields = [
            'id',
            'cast',
            'stage_name',
            'rule',
            'period_start',
            'period_end',
            'work_hours',
            'total_sales',
            'base_pay',
            'back_pay',
            'nomination_pay',
            'gross_amount',
            'deductions',
            'net_amount',
            'status',
            'approved_by',
            'approved_at',
            'details',
            'created_at',
        ]
        read_only_fields = fields


class CalculateRequestSerializer(serializers.Serializer):
    cast_id = serializers.UUIDField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()
    persist = serializers.BooleanField(default=False)
    status = serializers.ChoiceField(
        choices=[CalculationStatus.DRAFT, CalculationStatus.CONFIRMED], default=CalculationStatus.DRAFT
    )

    def validate(self, attrs):
        if attrs['period_start'] > attrs['period_end']:
            raise serializers.ValidationError({'period_end': 'Must be on or after period_start'})
        return attrs


class CalculationItemSerializer(serializers.Serializer):
    item_type = serializers.CharField()
    description = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2)
    rate = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class CalculationResultSerializer(serializers.Serializer):
    cast_id = serializers.UUIDField()
    rule_id = serializers.UUIDField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()
    work_hours = serializers.IntegerField()
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    base_pay = serializers.DecimalField(max_digits=12, decimal_places=2)
    back_pay = serializers.DecimalField(max_digits=12, decimal_places=2)
    nomination_pay = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_pay = serializers.DecimalField(max_digits=12, decimal_places=2)
    items = CalculationItemSerializer(many=True)


class MonthlyRequestSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class CalculationFilterSerializer(serializers.Serializer):
    cast_id = serializers.UUIDField(required=False)
    period_start = serializers.DateField(required=False)
    period_end = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=CalculationStatus.choices, required=False)


class ActiveFilterSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(required=False, allow_null=True)


class AssignmentFilterSerializer(serializers.Serializer):
    cast_id = serializers.UUIDField(required=False)
