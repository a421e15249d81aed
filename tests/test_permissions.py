import pytest

from balltickets.auth.permissions import (
    Permissions, ALL_PERMISSIONS, has_permission, has_route_access, get_allowed_routes,
    get_group_permissions,
)


@pytest.mark.parametrize('permission_key', ALL_PERMISSIONS)
def test_admin_has_every_permission(permission_key):
    assert has_permission(Permissions.ADMIN, permission_key)


def test_import_group_may_only_import():
    assert get_group_permissions(Permissions.IMPORT_GROUP) == [Permissions.IMPORT]


@pytest.mark.parametrize('group_name', [None, '', 'Gast'])
def test_unknown_groups_are_denied(group_name):
    for permission_key in ALL_PERMISSIONS:
        assert not has_permission(group_name, permission_key)


def test_route_access():
    assert has_route_access(Permissions.IMPORT_GROUP, '/backend')
    assert has_route_access(Permissions.IMPORT_GROUP, '/backend/import-alumni')
    assert not has_route_access(Permissions.IMPORT_GROUP, '/backend/reserves')
    assert not has_route_access(Permissions.ADMIN, '/backend/unknown')


def test_allowed_routes_for_import_group():
    assert get_allowed_routes(Permissions.IMPORT_GROUP) == ['/backend', '/backend/import-alumni']


@pytest.mark.parametrize('path', [
    '/backend/reserves',
    '/backend/delivery-methods',
    '/backend/buyer-groups',
    '/backend/buyers',
    '/backend/import-alumni',
    '/backend/tickets',
])
def test_admin_can_open_every_section(client, auth, admin_user, path):
    auth.login_staff()
    assert client.get(path).status_code == 200


@pytest.mark.parametrize('path, expected', [
    ('/backend', 200),
    ('/backend/import-alumni', 200),
    ('/backend/reserves', 403),
    ('/backend/tickets', 403),
    ('/backend/buyers', 403),
])
def test_import_group_access(client, auth, import_user, path, expected):
    auth.login_staff(email='import@example.com')
    assert client.get(path).status_code == expected


def test_backend_requires_password_login(client, seeded):
    response = client.get('/backend/reserves')
    assert response.status_code == 302
    assert '/backend/login' in response.headers['Location']


def test_buyer_session_cannot_open_backend(client, auth, buyer):
    auth.login_buyer()

    response = client.get('/backend/reserves')
    assert response.status_code == 302
    assert '/backend/login' in response.headers['Location']

    response = client.get('/backend')
    assert response.status_code == 302
