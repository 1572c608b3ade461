"""
Role based access control for venue staff.

Two tables drive every authorization decision in the API:

``ROLE_PERMISSIONS``
    Maps a role to the resources it may touch and the actions allowed on
    each. ``'*'`` grants everything; otherwise the (resource, action)
    pair must be listed exactly. ``'manage'`` is an action of its own and
    does not imply the others.

``ROUTE_PERMISSIONS``
    Maps a top-level screen path to the roles that may open it. Lookups
    use the longest matching prefix, so ``/cast/profile/edit`` resolves
    through ``/cast/profile``. Paths with no registered prefix are closed,
    except the root and the ``/auth/`` pages, which anyone may open.

Example:
    >>> has_permission('cashier', 'billing', 'process')
    True
    >>> can_access_route('hall', '/staff')
    False
"""

from .models import StaffRole

ALL_ROLES = tuple(StaffRole.values)

ROLE_PERMISSIONS = {
    'admin': '*',
    'manager': {
        'customers': ('create', 'view', 'edit', 'delete'),
        'staff': ('manage', 'view', 'edit'),
        'bookings': ('manage', 'view', 'edit', 'delete'),
        'billing': ('manage', 'view'),
        'reports': ('view', 'export'),
        'inventory': ('manage', 'view', 'edit'),
    },
    'hall': {
        'customers': ('view', 'edit'),
        'bookings': ('manage', 'view', 'edit'),
        'tables': ('manage', 'view'),
    },
    'cashier': {
        'billing': ('manage', 'view', 'process'),
        'reports': ('view',),
        'customers': ('view',),
    },
    'cast': {
        'profile': ('view', 'edit'),
        'schedule': ('view', 'submit'),
        'performance': ('view',),
    },
}

ROUTE_PERMISSIONS = {
    '/dashboard': ALL_ROLES,
    '/customers': ('admin', 'manager', 'hall', 'cashier'),
    '/staff': ('admin', 'manager'),
    '/bookings': ('admin', 'manager', 'hall'),
    '/billing': ('admin', 'manager', 'cashier'),
    '/inventory': ('admin', 'manager'),
    '/reports': ('admin', 'manager', 'cashier'),
    '/profile': ALL_ROLES,
    '/cast/profile': ('cast',),
    '/cast/schedule': ('cast',),
}


def has_permission(role, resource: str, action: str) -> bool:
    """Return True when ``role`` may perform ``action`` on ``resource``."""
    if not role:
        return False

    grants = ROLE_PERMISSIONS.get(role)
    if grants is None:
        return False
    if grants == '*':
        return True

    actions = grants.get(resource, ())
    return action in actions


def can_access_route(role, path: str) -> bool:
    """
    Check whether ``role`` may open the screen at ``path``.

    The root and ``/auth/`` pages are public. Any other path needs a
    registered prefix that lists the role.
    """
    normalized = '/' + path.strip('/')
    if normalized == '/' or normalized.startswith('/auth/'):
        return True
    if not role:
        return False

    match = None
    for prefix in ROUTE_PERMISSIONS:
        if normalized == prefix or normalized.startswith(prefix + '/'):
            if match is None or len(prefix) > len(match):
                match = prefix

    if match is None:
        return False
    return role in ROUTE_PERMISSIONS[match]


def accessible_routes(role) -> list:
    """List the registered routes ``role`` may open."""
    return [path for path, roles in ROUTE_PERMISSIONS.items() if role in roles]
