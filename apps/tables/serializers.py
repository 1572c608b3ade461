from rest_framework import serializers

from apps.accounts.validators import TABLE_NAME_PATTERN
from .models import Table, TableStatus


class TableSerializer(serializers.ModelSerializer):
    current_visit_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Table
        fields = [
            'id',
            'table_name',
            'capacity',
            'location',
            'is_vip',
            'is_active',
            'current_status',
            'current_visit_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class TableInputSerializer(serializers.Serializer):
    table_name = serializers.RegexField(
        TABLE_NAME_PATTERN,
        max_length=50,
        error_messages={'invalid': 'Use letters, digits and hyphens only.'},
    )
    capacity = serializers.IntegerField(min_value=1, max_value=50)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True)
    is_vip = serializers.BooleanField(default=False)
    is_active = serializers.BooleanField(default=True)


class TableFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TableStatus.choices, required=False)
    is_vip = serializers.BooleanField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False, allow_null=True)
    min_capacity = serializers.IntegerField(required=False, min_value=1)
    max_capacity = serializers.IntegerField(required=False, max_value=50)

    def validate(self, attrs):
        low, high = attrs.get('min_capacity'), attrs.get('max_capacity')
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError('min_capacity cannot exceed max_capacity')
        return attrs


class TableStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TableStatus.choices)


class AvailableTablesQuerySerializer(serializers.Serializer):
    capacity = serializers.IntegerField(min_value=1, max_value=50, default=1)
    date = serializers.DateField(required=False)
    time = serializers.TimeField(required=False, format='%H:%M', input_formats=['%H:%M'])

    def validate(self, attrs):
        if bool(attrs.get('date')) != bool(attrs.get('time')):
            raise serializers.ValidationError('date and time must be given together')
        return attrs
