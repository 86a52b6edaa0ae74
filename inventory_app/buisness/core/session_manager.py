"""
SessionManager - credential checks and signed session tokens

Responsibilities:
- Verify username/password against the salted hash in the users table
- Issue an HS256 token carrying {id, username, role} that expires after 8 hours
- Turn a token back into a SessionUser without touching storage
- Register new users (callers must already have checked the requester is an admin)

Tokens are stateless: logging out only drops the cookie, so a copied token
stays valid until it expires.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from inventory_app.data.core.user_info.user import User, ROLES
from inventory_app.logger import get_logger

logger = get_logger("inventory.domain.core.session")

AUTH_COOKIE_NAME = 'auth-token'
TOKEN_ALGORITHM = 'HS256'
TOKEN_LIFETIME = timedelta(hours=8)
INVALID_CREDENTIALS_MESSAGE = 'Invalid username or password'


@lru_cache(maxsize=1)
def _dummy_password_hash():
    """Hash checked for unknown usernames so both failure paths cost the same"""
    return generate_password_hash('not-a-real-password')


class SessionUser(UserMixin):
    """User rebuilt from token claims; role is as of token issuance"""

    def __init__(self, id, username, role):
        self.id = id
        self.username = username
        self.role = role

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_dict(self):
        return {'id': self.id, 'username': self.username, 'role': self.role}

    def __repr__(self):
        return f'<SessionUser {self.username} ({self.role})>'


@dataclass
class LoginResult:
    success: bool
    user: Optional[SessionUser] = None
    token: Optional[str] = None
    message: Optional[str] = None


@dataclass
class RegisterResult:
    success: bool
    message: Optional[str] = None


class SessionManager:
    """Token issuing and verification bound to a signing secret and a SQLAlchemy session"""

    def __init__(self, secret, session, lifetime=TOKEN_LIFETIME):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.session = session
        self.lifetime = lifetime

    def login(self, username, password, now=None) -> LoginResult:
        """
        Check credentials and issue a token on success

        Unknown usernames and wrong passwords produce the same result, and both
        run one password hash check, so neither the response nor its timing
        reveals which usernames exist.
        """
        user = self.session.query(User).filter_by(username=username).first()

        if user is None:
            check_password_hash(_dummy_password_hash(), password)

        if user is None or not user.check_password(password):
            logger.warning(f"Failed login attempt for username: {username}")
            return LoginResult(success=False, message=INVALID_CREDENTIALS_MESSAGE)

        session_user = SessionUser(user.id, user.username, user.role)
        token = self.issue_token(session_user, now=now)
        logger.info(f"Successful login for user: {username}")
        return LoginResult(success=True, user=session_user, token=token)

    def register(self, username, password, role) -> RegisterResult:
        """Create a user with a hashed password; the caller enforces admin access"""
        if role not in ROLES:
            return RegisterResult(success=False, message='Invalid role')

        existing = self.session.query(User).filter_by(username=username).first()
        if existing is not None:
            logger.warning(f"Registration refused, username already exists: {username}")
            return RegisterResult(success=False, message='Username already exists')

        user = User(username=username, role=role)
        user.set_password(password)
        self.session.add(user)
        self.session.commit()
        logger.info(f"Registered {role} user: {username}")
        return RegisterResult(success=True)

    def issue_token(self, user, now=None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            'id': user.id,
            'username': user.username,
            'role': user.role,
            'iat': issued_at,
            'exp': issued_at + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=TOKEN_ALGORITHM)

    def verify_token(self, token) -> Optional[SessionUser]:
        """Return the token's user, or None for any missing, forged, expired or malformed token"""
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[TOKEN_ALGORITHM],
                options={'require': ['exp', 'iat']},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired session token")
            return None
        except jwt.PyJWTError as e:
            logger.debug(f"Rejected invalid session token: {e}")
            return None

        user_id = payload.get('id')
        username = payload.get('username')
        role = payload.get('role')
        if not isinstance(user_id, int) or not username or role not in ROLES:
            logger.debug("Rejected session token with malformed claims")
            return None
        return SessionUser(user_id, username, role)
