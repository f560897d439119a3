"""Authentication and authorization decorators.

This module contains decorators for protecting routes with a bearer access
token and for checking member roles.
"""
from functools import wraps
from typing import Callable, Optional

from flask import g, request

from models.member import Role
from utils.auth_utils import verify_access_token
from utils.errors import Forbidden, Unauthenticated


def _bearer_token() -> Optional[str]:
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def token_required(f: Optional[Callable] = None, *, allow_expired: bool = False) -> Callable:
    """Decorator to require a valid access token for a route.

    The decoded identity is attached to ``g.current_user`` as
    ``{'userId': int, 'role': str}``.

    Args:
        f: The function to decorate.
        allow_expired: Accept an expired token whose signature still verifies.
            Used by the refresh route, which re-checks the refresh token.

    Returns:
        The decorated function that checks authentication.

    Raises:
        Unauthenticated: If the header is missing or the token does not verify.

    Example:
        @books_bp.route('/books')
        @token_required
        def list_books():
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def decorated_function(*args, **kwargs):
            token = _bearer_token()
            if token is None:
                raise Unauthenticated('Missing bearer token')

            claims = verify_access_token(token, verify_exp=not allow_expired)
            g.current_user = {'userId': claims['userId'], 'role': claims['role']}
            return func(*args, **kwargs)
        return decorated_function

    if f is not None:
        return decorator(f)
    return decorator


def role_required(*roles: Role) -> Callable:
    """Decorator to require specific member roles for a route.

    Must be applied below ``token_required`` so the identity is attached.

    Args:
        *roles: Roles allowed to call the route.

    Returns:
        A decorator function that checks member roles.

    Example:
        @books_bp.route('/book', methods=['POST'])
        @token_required
        @role_required(Role.ADMIN)
        def create_book():
            ...
    """
    allowed = {Role(role).value for role in roles}

    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            current_user = g.get('current_user')
            if current_user is None:
                raise Unauthenticated()
            if current_user['role'] not in allowed:
                raise Forbidden('You do not have permission to perform this action')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def current_user_id() -> int:
    """Id of the member attached by ``token_required``."""
    return g.current_user['userId']


def current_user_is_admin() -> bool:
    return g.current_user['role'] == Role.ADMIN.value
