"""Authentication routes for the library management API.

This module handles member registration, login, logout and access token
refresh. Login issues a short-lived access token in the response body and
a refresh token in an httpOnly cookie named ``refreshToken_<memberId>``.
"""
import logging

from flask import Blueprint, current_app, jsonify, request

from models.member import Role
from repositories.member_repository import MemberRepository
from utils.auth_utils import (
    compare_password,
    generate_access_token,
    generate_refresh_token,
    verify_refresh_token,
)
from utils.decorators import current_user_id, token_required
from utils.errors import Forbidden, Unauthenticated, ValidationError
from utils.request_utils import json_body

logger = logging.getLogger(__name__)

# Create authentication blueprint
auth_bp = Blueprint('auth', __name__)

members = MemberRepository()


def refresh_cookie_name(member_id: int) -> str:
    return f'refreshToken_{member_id}'


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new member.

    JSON payload:
        name, age, phoneNumber, email, address, password, role (optional).

    Returns:
        201 with the new member id.
    """
    data = json_body()
    if str(data.get('role', Role.USER.value)) == Role.ADMIN.value \
            and not current_app.config['ALLOW_ADMIN_REGISTRATION']:
        raise Forbidden('Admin accounts cannot be self-registered')

    member = members.create(data)
    logger.info('Member %s registered', member.id)
    return jsonify({
        'success': True,
        'message': 'User registered successfully',
        'id': member.id
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email and password for tokens.

    JSON payload:
        email: Member email.
        password: Plain text password.

    Returns:
        200 with ``accessToken``; the refresh token is set as a cookie.
    """
    data = json_body()
    email = data.get('email')
    password = data.get('password')
    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise ValidationError('Email and password are required')

    member = members.get_by_email(email)
    if member is None:
        return jsonify({'success': False, 'message': 'User not found'}), 400

    if not compare_password(password, member.password):
        logger.info('Failed login for member %s', member.id)
        raise Unauthenticated('Invalid credentials')

    role = member.role.value
    access_token = generate_access_token(member.id, role)
    refresh_token = generate_refresh_token(member.id, role)
    members.update_token(member.id, refresh_token)

    response = jsonify({'accessToken': access_token})
    response.set_cookie(
        refresh_cookie_name(member.id),
        refresh_token,
        max_age=int(current_app.config['REFRESH_TOKEN_EXPIRES'].total_seconds()),
        httponly=True,
        secure=current_app.config['REFRESH_COOKIE_SECURE'],
        samesite='Strict',
    )
    logger.info('Member %s logged in', member.id)
    return response


@auth_bp.route('/logout', methods=['POST'])
@token_required
def logout():
    """Forget the member's refresh token and clear its cookie."""
    member_id = current_user_id()
    members.clear_token(member_id)

    response = jsonify({'success': True, 'message': 'Logged out successfully'})
    response.delete_cookie(
        refresh_cookie_name(member_id),
        httponly=True,
        secure=current_app.config['REFRESH_COOKIE_SECURE'],
        samesite='Strict',
    )
    logger.info('Member %s logged out', member_id)
    return response


@auth_bp.route('/refresh', methods=['POST'])
@token_required(allow_expired=True)
def refresh():
    """Mint a new access token from the refresh token cookie.

    The access token in the Authorization header only identifies the member
    and may be expired; the refresh token must match the one stored at login
    and verify against the refresh secret.

    Returns:
        200 with a new ``accessToken``.
    """
    member_id = current_user_id()
    refresh_token = request.cookies.get(refresh_cookie_name(member_id))
    if not refresh_token:
        raise Unauthenticated('Missing refresh token')

    member = members.get_by_id(member_id)
    if member.refresh_token != refresh_token:
        logger.warning('Refresh token mismatch for member %s', member_id)
        raise Forbidden('Invalid refresh token')

    try:
        claims = verify_refresh_token(refresh_token)
    except Unauthenticated as e:
        raise Forbidden('Invalid refresh token') from e
    if claims['userId'] != member.id:
        raise Forbidden('Invalid refresh token')

    return jsonify({'accessToken': generate_access_token(member.id, member.role.value)})
