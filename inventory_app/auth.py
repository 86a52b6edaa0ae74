from functools import wraps

from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user

from inventory_app import db, login_manager, limiter
from inventory_app.buisness.core.session_manager import (
    AUTH_COOKIE_NAME,
    TOKEN_LIFETIME,
    SessionManager,
)
from inventory_app.data.core.user_info.user import User
from inventory_app.logger import get_logger
from inventory_app.utils.logging_sanitizer import sanitize_dict
from inventory_app.presentation.routes.api import json_body

logger = get_logger("inventory.auth")
auth = Blueprint('auth', __name__)


def get_session_manager():
    return SessionManager(current_app.config['JWT_SECRET'], db.session)


@login_manager.request_loader
def load_user_from_cookie(req):
    """Rebuild the user from the auth cookie; any failure means anonymous"""
    return get_session_manager().verify_token(req.cookies.get(AUTH_COOKIE_NAME))


@login_manager.unauthorized_handler
def unauthorized():
    logger.debug(f"Unauthenticated request to {request.path}")
    return jsonify({'success': False, 'error': 'Unauthorized'}), 401


def get_current_user():
    """The signed-in SessionUser, or None"""
    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def is_admin():
    user = get_current_user()
    return user is not None and user.is_admin


def _admin_denied(user):
    logger.warning(f"Admin access denied for {user.username} on {request.path}")
    return jsonify({'success': False, 'error': 'Unauthorized. Admin access required.'}), 403


def admin_required(view):
    """
    Require a signed-in admin.

    A token without the admin role is refused outright. An admin token is
    re-checked against the users table so a demoted admin loses access
    before the token expires.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = get_current_user()
        if user is None:
            return login_manager.unauthorized()

        if not is_admin():
            return _admin_denied(user)

        stored = db.session.get(User, user.id)
        if stored is None or not stored.is_admin:
            return _admin_denied(user)
        return view(*args, **kwargs)
    return wrapped


@auth.route('/login', methods=['POST'])
@limiter.limit(lambda: current_app.config['LOGIN_RATE_LIMIT'])
def login():
    data = json_body()
    username = data.get('username')
    password = data.get('password')

    logger.debug(f"Login attempt: {sanitize_dict(data)}")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({'success': False, 'message': 'Username and password are required'}), 400

    result = get_session_manager().login(username, password)
    if not result.success:
        return jsonify({'success': False, 'message': result.message}), 401

    response = jsonify({'success': True, 'user': result.user.to_dict()})
    response.set_cookie(
        AUTH_COOKIE_NAME,
        result.token,
        max_age=int(TOKEN_LIFETIME.total_seconds()),
        path='/',
        httponly=True,
        secure=current_app.config['AUTH_COOKIE_SECURE'],
        samesite='Lax',
    )
    return response


@auth.route('/logout', methods=['POST'])
def logout():
    user = get_current_user()
    response = jsonify({'success': True, 'redirect': '/login'})
    response.delete_cookie(AUTH_COOKIE_NAME, path='/')
    if user is not None:
        logger.info(f"User logged out: {user.username}")
    return response


@auth.route('/me', methods=['GET'])
def me():
    user = get_current_user()
    if user is None:
        return jsonify({'user': None}), 401
    return jsonify({'user': user.to_dict()})


@auth.route('/register', methods=['POST'])
@admin_required
def register():
    data = json_body()
    username = data.get('username')
    password = data.get('password')
    role = data.get('role')

    logger.debug(f"Registration request from {current_user.username}: {sanitize_dict(data)}")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({'success': False, 'message': 'Username and password are required'}), 400

    if role not in ('admin', 'staff'):
        return jsonify({'success': False, 'message': 'Invalid role'}), 400

    result = get_session_manager().register(username, password, role)
    if not result.success:
        return jsonify({'success': False, 'message': result.message or 'Registration failed'}), 400

    return jsonify({'success': True})
