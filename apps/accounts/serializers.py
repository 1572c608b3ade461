from rest_framework import serializers

from .models import User
from .roles import accessible_routes
from .validators import KATAKANA_PATTERN


class UserSerializer(serializers.ModelSerializer):
    """Signed-in user with the role resolved from the staff profile."""

    role = serializers.SerializerMethodField()
    staff_id = serializers.SerializerMethodField()
    full_name = serializers.SerializerMethodField()
    routes = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'role',
            'staff_id',
            'full_name',
            'routes',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields

    def get_role(self, obj):
        return obj.role

    def get_staff_id(self, obj):
        staff = obj.staff
        return str(staff.id) if staff else None

    def get_full_name(self, obj):
        staff = obj.staff
        return staff.full_name if staff else obj.get_display_name()

    def get_routes(self, obj):
        return accessible_routes(obj.role)


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to blacklist")


class ProfileUpdateSerializer(serializers.Serializer):
    """Fields a user may change on their own profile."""

    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    full_name = serializers.CharField(min_length=1, max_length=100, required=False)
    full_name_kana = serializers.RegexField(
        regex=KATAKANA_PATTERN,
        max_length=100,
        required=False,
        allow_blank=True,
        error_messages={'invalid': 'Must be written in katakana.'},
    )


class PermissionCheckSerializer(serializers.Serializer):
    """Either a resource/action pair or a route path to check."""

    resource = serializers.CharField(required=False)
    action = serializers.CharField(required=False)
    path = serializers.CharField(required=False)

    def validate(self, attrs):
        if attrs.get('path'):
            return attrs
        if not attrs.get('resource') or not attrs.get('action'):
            raise serializers.ValidationError(
                'Provide either path, or both resource and action.'
            )
        return attrs
