"""
DRF permission classes backed by the role matrix in ``apps.accounts.roles``.

ViewSets declare which resource they guard::

    class CustomerViewSet(viewsets.ModelViewSet):
        permission_classes = [IsAuthenticated, HasResourcePermission]
        permission_resource = 'customers'
        permission_action_map = {'visits': 'view', 'bulk_status': 'edit'}

Function views use ``require_permission``::

    @permission_classes([IsAuthenticated, require_permission('reports', 'view')])
    def analytics_summary(request):
        ...

``permission_resource`` may also be a tuple of resources; access is granted
when any one of them allows the action.
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import StaffRole
from .roles import has_permission

DEFAULT_ACTION_MAP = {
    'list': 'view',
    'retrieve': 'view',
    'create': 'create',
    'update': 'edit',
    'partial_update': 'edit',
    'destroy': 'delete',
}


def _resources(value):
    if isinstance(value, str):
        return (value,)
    return tuple(value or ())


def role_allows(user, resources, action) -> bool:
    role = getattr(user, 'role', None)
    return any(has_permission(role, resource, action) for resource in _resources(resources))


class HasResourcePermission(BasePermission):
    """
    Permission: the user's role grants the view's resource/action pair.

    The action comes from ``view.permission_action_map`` first, then the
    standard CRUD mapping, then the HTTP method (safe methods are ``view``,
    everything else ``manage``).
    """

    message = 'Your role does not allow this operation.'

    def get_action(self, request, view):
        view_action = getattr(view, 'action', None)
        custom = getattr(view, 'permission_action_map', {})
        if view_action in custom:
            return custom[view_action]
        if view_action in DEFAULT_ACTION_MAP:
            return DEFAULT_ACTION_MAP[view_action]
        return 'view' if request.method in SAFE_METHODS else 'manage'

    def has_permission(self, request, view):
        resources = getattr(view, 'permission_resource', None)
        if not resources:
            return False
        return role_allows(request.user, resources, self.get_action(request, view))


def require_permission(resources, action):
    """Build a permission class for a fixed resource/action pair."""

    class RequiredPermission(BasePermission):
        message = 'Your role does not allow this operation.'

        def has_permission(self, request, view):
            return role_allows(request.user, resources, action)

    RequiredPermission.__name__ = f'Require_{"_".join(_resources(resources))}_{action}'
    return RequiredPermission


class HasStaffProfile(BasePermission):
    """Permission: the user is linked to an active Staff row."""

    message = 'An active staff profile is required.'

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.staff is not None


class IsCastUser(BasePermission):
    """Permission: the user's staff role is cast."""

    message = 'Only cast members can access this endpoint.'

    def has_permission(self, request, view):
        return getattr(request.user, 'role', None) == StaffRole.CAST.value
