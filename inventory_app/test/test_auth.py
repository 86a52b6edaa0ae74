"""
Authentication and authorization tests
Login, session cookie handling, token expiry and admin-only routes
"""
from datetime import datetime, timedelta, timezone

import jwt

from inventory_app import db
from inventory_app.auth import get_current_user, is_admin
from inventory_app.buisness.core import session_manager
from inventory_app.buisness.core.session_manager import (
    AUTH_COOKIE_NAME,
    SessionManager,
    SessionUser,
)
from inventory_app.data.core.user_info.user import User
from inventory_app.test.conftest import (
    ADMIN_PASSWORD,
    STAFF_PASSWORD,
    create_user,
    login_user,
)


def token_for(app, user_id, username, role, now=None):
    manager = SessionManager(app.config['JWT_SECRET'], None)
    return manager.issue_token(SessionUser(user_id, username, role), now=now)


def test_login_sets_http_only_cookie(client, admin_user):
    response = login_user(client, 'admin', ADMIN_PASSWORD)

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['user'] == {'id': admin_user, 'username': 'admin', 'role': 'admin'}

    set_cookie = response.headers.get('Set-Cookie')
    assert set_cookie.startswith(f'{AUTH_COOKIE_NAME}=')
    assert 'HttpOnly' in set_cookie
    assert 'Max-Age=28800' in set_cookie


def test_unknown_user_and_wrong_password_look_the_same(client, admin_user):
    unknown = login_user(client, 'nobody', 'whatever123')
    wrong = login_user(client, 'admin', 'not-the-password')

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json()
    assert 'Set-Cookie' not in unknown.headers
    assert 'Set-Cookie' not in wrong.headers


def test_unknown_user_still_runs_a_hash_check(client, admin_user, monkeypatch):
    checked = []
    real_check = session_manager.check_password_hash

    def recording_check(pwhash, password):
        checked.append(password)
        return real_check(pwhash, password)

    monkeypatch.setattr(session_manager, 'check_password_hash', recording_check)

    response = login_user(client, 'nobody', 'whatever123')

    assert response.status_code == 401
    assert checked == ['whatever123']


def test_login_requires_both_fields(client):
    response = client.post('/api/auth/login', json={'username': 'admin'})
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_me_returns_current_user(staff_client, staff_user):
    response = staff_client.get('/api/auth/me')
    assert response.status_code == 200
    assert response.get_json()['user']['username'] == 'staff'
    assert response.get_json()['user']['role'] == 'staff'


def test_me_without_cookie_is_401(client):
    response = client.get('/api/auth/me')
    assert response.status_code == 401
    assert response.get_json() == {'user': None}


def test_logout_clears_cookie(admin_client):
    response = admin_client.post('/api/auth/logout')
    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'redirect': '/login'}

    assert admin_client.get('/api/auth/me').status_code == 401


def test_each_request_sees_its_own_user(app, client, admin_user, staff_user):
    login_user(client, 'admin', ADMIN_PASSWORD)
    assert client.get('/api/auth/me').get_json()['user']['username'] == 'admin'

    login_user(client, 'staff', STAFF_PASSWORD)
    assert client.get('/api/auth/me').get_json()['user']['username'] == 'staff'
    assert client.post('/api/categories', json={'name': 'Paint'}).status_code == 403


def test_expired_token_is_rejected(app, client, staff_user):
    issued = datetime.now(timezone.utc) - timedelta(hours=8, minutes=1)
    client.set_cookie(AUTH_COOKIE_NAME, token_for(app, staff_user, 'staff', 'staff', now=issued))

    assert client.get('/api/products').status_code == 401
    assert client.get('/api/auth/me').status_code == 401


def test_token_signed_with_other_secret_is_rejected(client, staff_user):
    now = datetime.now(timezone.utc)
    forged = jwt.encode(
        {'id': staff_user, 'username': 'staff', 'role': 'admin',
         'iat': now, 'exp': now + timedelta(hours=1)},
        'some-other-secret',
        algorithm='HS256',
    )
    client.set_cookie(AUTH_COOKIE_NAME, forged)

    assert client.get('/api/auth/me').status_code == 401


def test_verify_token_round_trip(app, staff_user):
    manager = SessionManager(app.config['JWT_SECRET'], None)
    token = manager.issue_token(SessionUser(staff_user, 'staff', 'staff'))

    user = manager.verify_token(token)
    assert user.id == staff_user
    assert user.role == 'staff'
    assert manager.verify_token('not-a-token') is None
    assert manager.verify_token(None) is None


def test_session_user_role_check():
    assert SessionUser(1, 'admin', 'admin').is_admin is True
    assert SessionUser(2, 'staff', 'staff').is_admin is False


def test_is_admin_follows_the_request_cookie(app, admin_user, staff_user):
    admin_token = token_for(app, admin_user, 'admin', 'admin')
    staff_token = token_for(app, staff_user, 'staff', 'staff')

    with app.test_request_context('/', headers={'Cookie': f'{AUTH_COOKIE_NAME}={admin_token}'}):
        assert is_admin() is True
        assert get_current_user().username == 'admin'

    with app.test_request_context('/', headers={'Cookie': f'{AUTH_COOKIE_NAME}={staff_token}'}):
        assert is_admin() is False

    with app.test_request_context('/'):
        assert get_current_user() is None
        assert is_admin() is False


def test_register_requires_admin(app, staff_client):
    response = staff_client.post('/api/auth/register',
                                 json={'username': 'new', 'password': 'pw123456', 'role': 'staff'})
    assert response.status_code == 403
    with app.app_context():
        assert User.query.filter_by(username='new').first() is None


def test_register_anonymous_is_401(client):
    response = client.post('/api/auth/register',
                           json={'username': 'new', 'password': 'pw123456', 'role': 'staff'})
    assert response.status_code == 401


def test_admin_registers_user(app, admin_client):
    response = admin_client.post('/api/auth/register',
                                 json={'username': 'clerk', 'password': 'pw123456', 'role': 'staff'})
    assert response.status_code == 200
    assert response.get_json() == {'success': True}

    with app.app_context():
        created = User.query.filter_by(username='clerk').first()
        assert created.role == 'staff'
        assert created.password_hash != 'pw123456'
        assert created.check_password('pw123456')


def test_register_rejects_duplicates_and_bad_roles(admin_client):
    duplicate = admin_client.post('/api/auth/register',
                                  json={'username': 'admin', 'password': 'pw123456', 'role': 'staff'})
    assert duplicate.status_code == 400
    assert duplicate.get_json()['message'] == 'Username already exists'

    bad_role = admin_client.post('/api/auth/register',
                                 json={'username': 'boss', 'password': 'pw123456', 'role': 'owner'})
    assert bad_role.status_code == 400
    assert bad_role.get_json()['message'] == 'Invalid role'


def test_demoted_admin_loses_admin_routes(app, admin_client, admin_user):
    with app.app_context():
        db.session.get(User, admin_user).role = 'staff'
        db.session.commit()

    response = admin_client.post('/api/categories', json={'name': 'Paint'})
    assert response.status_code == 403


def test_promoted_staff_needs_a_fresh_token(app, client):
    clerk_id = create_user(app, 'clerk', STAFF_PASSWORD, role='staff')
    login_user(client, 'clerk', STAFF_PASSWORD)

    with app.app_context():
        db.session.get(User, clerk_id).role = 'admin'
        db.session.commit()

    assert client.post('/api/categories', json={'name': 'Paint'}).status_code == 403

    login_user(client, 'clerk', STAFF_PASSWORD)
    assert client.post('/api/categories', json={'name': 'Paint'}).status_code == 200


def test_staff_cannot_write_admin_resources(staff_client, catalog):
    assert staff_client.post('/api/categories', json={'name': 'Paint'}).status_code == 403
    assert staff_client.put(f"/api/suppliers/{catalog['supplier_id']}", json={'name': 'X'}).status_code == 403
    assert staff_client.delete(f"/api/customers/{catalog['customer_id']}").status_code == 403
    assert staff_client.delete(f"/api/products/{catalog['hammer_id']}").status_code == 403


def test_protected_routes_need_login(client):
    for path in ('/api/products', '/api/categories', '/api/sales', '/api/reports/summary'):
        response = client.get(path)
        assert response.status_code == 401, path
        assert response.get_json()['success'] is False
