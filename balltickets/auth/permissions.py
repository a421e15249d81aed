"""
Backend permissions configuration.

Each staff group maps to the admin sections it may open. The `Admin`
group bypasses every check; unknown groups and sections are denied.
"""
from functools import wraps
from flask import abort, redirect, url_for, flash
from flask_principal import Permission as PrincipalPermission


class Permissions:
    """Centralized permission constants."""
    RESERVES = 'reserves'
    DELIVERY_METHODS = 'delivery_methods'
    BUYERS = 'buyers'
    IMPORT = 'import'
    TICKETS = 'tickets'

    # Groups
    ADMIN = 'Admin'
    IMPORT_GROUP = 'Import'


ALL_PERMISSIONS = (
    Permissions.RESERVES,
    Permissions.DELIVERY_METHODS,
    Permissions.BUYERS,
    Permissions.IMPORT,
    Permissions.TICKETS,
)

GROUP_PERMISSIONS = {
    Permissions.ADMIN: {
        Permissions.RESERVES: True,
        Permissions.DELIVERY_METHODS: True,
        Permissions.BUYERS: True,
        Permissions.IMPORT: True,
        Permissions.TICKETS: True,
    },
    Permissions.IMPORT_GROUP: {
        Permissions.RESERVES: False,
        Permissions.DELIVERY_METHODS: False,
        Permissions.BUYERS: False,
        Permissions.IMPORT: True,
        Permissions.TICKETS: False,
    },
}

# Map route paths to permission keys
ROUTE_PERMISSIONS = {
    '/backend/reserves': Permissions.RESERVES,
    '/backend/delivery-methods': Permissions.DELIVERY_METHODS,
    '/backend/buyer-groups': Permissions.BUYERS,
    '/backend/buyers': Permissions.BUYERS,
    '/backend/import-alumni': Permissions.IMPORT,
    '/backend/tickets': Permissions.TICKETS,
}


def has_permission(group_name, permission_key):
    """Check if a group has a specific permission."""
    if not group_name:
        return False
    if group_name == Permissions.ADMIN:
        return True
    group_perms = GROUP_PERMISSIONS.get(group_name)
    if not group_perms:
        return False
    return group_perms.get(permission_key, False)


def get_group_permissions(group_name):
    return [key for key in ALL_PERMISSIONS if has_permission(group_name, key)]


def has_route_access(group_name, route_path):
    # Always allow access to dashboard
    if route_path in ('/backend', '/backend/'):
        return True

    permission_key = ROUTE_PERMISSIONS.get(route_path)
    if not permission_key:
        return False

    return has_permission(group_name, permission_key)


def get_allowed_routes(group_name):
    allowed = ['/backend']
    for route, permission_key in ROUTE_PERMISSIONS.items():
        if has_permission(group_name, permission_key):
            allowed.append(route)
    return allowed


class PermissionNeed(tuple):
    """A need for a specific permission."""
    def __new__(cls, permission_name):
        return tuple.__new__(cls, ('permission', permission_name))


def create_permission(permission_name):
    """Create a Flask-Principal Permission object for a permission name."""
    return PrincipalPermission(PermissionNeed(permission_name))


def permission_required(permission_name):
    """
    Decorator to require a backend permission for a route.

    Usage:
        @permission_required(Permissions.RESERVES)
        def reserves():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            from .utils import is_backend_session
            if not is_backend_session():
                flash('Für den Backend-Zugang ist eine Anmeldung mit Passwort erforderlich.', 'error')
                return redirect(url_for('auth_bp.backend_login'))
            permission = create_permission(permission_name)
            if not permission.can():
                abort(403)
            return f(*args, **kwargs)
        return decorated_function
    return decorator
