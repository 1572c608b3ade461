from rest_framework import serializers

from apps.accounts.validators import KATAKANA_PATTERN, PHONE_PATTERN, validate_birthday
from .models import Customer, CustomerStatus


class CustomerSerializer(serializers.ModelSerializer):
    """Customer record for display."""

    class Meta:
        model = Customer
        fields = [
            'id',
            'name',
            'name_kana',
            'phone_number',
            'line_id',
            'birthday',
            'memo',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CustomerInputSerializer(serializers.Serializer):
    """Validate customer create/update payloads."""

    name = serializers.CharField(min_length=1, max_length=100)
    name_kana = serializers.RegexField(
        KATAKANA_PATTERN,
        max_length=100,
        required=False,
        allow_blank=True,
        error_messages={'invalid': 'Must be written in full-width katakana.'},
    )
    phone_number = serializers.RegexField(
        PHONE_PATTERN,
        required=False,
        allow_blank=True,
        error_messages={'invalid': 'Enter a valid phone number.'},
    )
    line_id = serializers.CharField(max_length=50, required=False, allow_blank=True)
    birthday = serializers.DateField(required=False, allow_null=True, validators=[validate_birthday])
    memo = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=CustomerStatus.choices, default=CustomerStatus.ACTIVE)


class CustomerFilterSerializer(serializers.Serializer):
    """Validate customer search query parameters."""

    query = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=CustomerStatus.choices, required=False)


class BulkStatusSerializer(serializers.Serializer):
    customer_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1, max_length=500)
    status = serializers.ChoiceField(choices=CustomerStatus.choices)


class BulkResultSerializer(serializers.Serializer):
    succeeded = serializers.ListField(child=serializers.CharField())
    failed = serializers.ListField(child=serializers.DictField())
