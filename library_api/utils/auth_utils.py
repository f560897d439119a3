"""Password hashing and JSON Web Token helpers.

Passwords are hashed with Werkzeug's salted one-way hash. Tokens are HS256
JWTs carrying ``userId`` and ``role`` claims; access and refresh tokens are
signed with different secrets taken from the active application config.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from utils.errors import InvalidTokenError, TokenExpiredError


def hash_password(password: str) -> str:
    """Hash a plaintext password with a per-call random salt.

    Args:
        password: Plain text password.

    Returns:
        Hash string safe to store in the database.
    """
    return generate_password_hash(password)


def compare_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash.

    Args:
        password: Plain text password.
        hashed_password: Hash produced by ``hash_password``.

    Returns:
        True if the password matches, False otherwise.
    """
    if not hashed_password:
        return False
    return check_password_hash(hashed_password, password)


def _sign(user_id: int, role: str, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        'userId': user_id,
        'role': role,
        'iat': now,
        'exp': now + expires_delta,
    }
    return jwt.encode(claims, secret, algorithm=current_app.config['JWT_ALGORITHM'])


def generate_access_token(user_id: int, role: str,
                          expires_delta: Optional[timedelta] = None) -> str:
    """Create a short-lived access token.

    Args:
        user_id: Member identifier.
        role: Member role.
        expires_delta: Lifetime override, ``ACCESS_TOKEN_EXPIRES`` by default.

    Returns:
        Encoded JWT.
    """
    if expires_delta is None:
        expires_delta = current_app.config['ACCESS_TOKEN_EXPIRES']
    return _sign(user_id, role, current_app.config['ACCESS_TOKEN_SECRET'], expires_delta)


def generate_refresh_token(user_id: int, role: str,
                           expires_delta: Optional[timedelta] = None) -> str:
    """Create a long-lived refresh token.

    Args:
        user_id: Member identifier.
        role: Member role.
        expires_delta: Lifetime override, ``REFRESH_TOKEN_EXPIRES`` by default.

    Returns:
        Encoded JWT.
    """
    if expires_delta is None:
        expires_delta = current_app.config['REFRESH_TOKEN_EXPIRES']
    return _sign(user_id, role, current_app.config['REFRESH_TOKEN_SECRET'], expires_delta)


def verify_token(token: str, secret: str, verify_exp: bool = True) -> Dict[str, Any]:
    """Verify a token's signature and expiry.

    Args:
        token: Encoded JWT.
        secret: Secret the token must be signed with.
        verify_exp: Set to False to accept an expired but well-signed token.

    Returns:
        Decoded claims.

    Raises:
        TokenExpiredError: If the token has expired.
        InvalidTokenError: If the signature does not verify or claims are missing.
    """
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[current_app.config['JWT_ALGORITHM']],
            options={'verify_exp': verify_exp, 'require': ['exp', 'userId', 'role']},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError() from e

    if not isinstance(claims['userId'], int):
        raise InvalidTokenError('Invalid token: malformed user identifier')
    return claims


def verify_access_token(token: str, verify_exp: bool = True) -> Dict[str, Any]:
    return verify_token(token, current_app.config['ACCESS_TOKEN_SECRET'], verify_exp)


def verify_refresh_token(token: str) -> Dict[str, Any]:
    return verify_token(token, current_app.config['REFRESH_TOKEN_SECRET'])
