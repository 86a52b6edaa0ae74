"""
Database build tests
Table creation and bootstrap admin seeding
"""
from inventory_app.build import build_database, ensure_admin_user
from inventory_app.data.core.user_info.user import User


def test_ensure_admin_user_creates_once(app_context):
    assert ensure_admin_user('boss', 'boss-password-1') is True
    assert ensure_admin_user('boss', 'another-password') is False

    boss = User.query.filter_by(username='boss').one()
    assert boss.role == 'admin'
    assert boss.check_password('boss-password-1')


def test_ensure_admin_user_needs_password(app_context, monkeypatch):
    monkeypatch.delenv('ADMIN_USER_PASSWORD', raising=False)
    assert ensure_admin_user('boss') is False
    assert User.query.filter_by(username='boss').first() is None


def test_build_database_seeds_admin_from_env(app_context, monkeypatch):
    monkeypatch.setenv('ADMIN_USERNAME', 'root-admin')
    monkeypatch.setenv('ADMIN_USER_PASSWORD', 'from-env-password')

    build_database(app_context)

    admin = User.query.filter_by(username='root-admin').one()
    assert admin.is_admin
    assert admin.check_password('from-env-password')
