from rest_framework import serializers

from apps.accounts.models import StaffRole
from apps.accounts.validators import KATAKANA_PATTERN, validate_not_future
from .models import Staff


class StaffSerializer(serializers.ModelSerializer):
    """Staff member with the linked login email."""

    email = serializers.EmailField(source='user.email', read_only=True, default=None)

    class Meta:
        model = Staff
        fields = [
            'id',
            'full_name',
            'full_name_kana',
            'role',
            'hire_date',
            'is_active',
            'email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'email', 'created_at', 'updated_at']


class StaffCreateSerializer(serializers.Serializer):
    full_name = serializers.CharField(min_length=1, max_length=100)
    full_name_kana = serializers.RegexField(
        KATAKANA_PATTERN, max_length=100, required=False, allow_blank=True
    )
    role = serializers.ChoiceField(choices=StaffRole.choices)
    hire_date = serializers.DateField(validators=[validate_not_future])
    is_active = serializers.BooleanField(default=True)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(
        required=False,
        write_only=True,
        min_length=8,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        if attrs.get('email') and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'Password is required when email is given'})
        return attrs


class StaffUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(min_length=1, max_length=100, required=False)
    full_name_kana = serializers.RegexField(
        KATAKANA_PATTERN, max_length=100, required=False, allow_blank=True
    )
    role = serializers.ChoiceField(choices=StaffRole.choices, required=False)
    hire_date = serializers.DateField(required=False, validators=[validate_not_future])
    is_active = serializers.BooleanField(required=False)


class StaffFilterSerializer(serializers.Serializer):
    """Validate staff list query parameters."""

    query = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=StaffRole.choices, required=False)
    is_active = serializers.BooleanField(required=False, allow_null=True)
