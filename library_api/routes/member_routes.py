"""Member profile endpoints.

Members are created through ``/register``; these routes read, change and
remove them. Responses never include the password hash or refresh token.
"""
from flask import Blueprint, jsonify

from models.member import Role
from repositories.member_repository import MemberRepository
from utils.decorators import role_required, token_required
from utils.request_utils import json_body, parse_id, parse_pagination

# Create members blueprint
members_bp = Blueprint('members', __name__)

members = MemberRepository()


@members_bp.route('/member/<member_id>', methods=['GET'])
@token_required
def get_member(member_id: str):
    """Get a member profile.

    Args:
        member_id: Member identifier.

    Returns:
        JSON response with the member, or 404 if it does not exist.
    """
    member = members.get_by_id(parse_id(member_id, 'member id'))
    return jsonify({'success': True, 'user': member.to_dict()})


@members_bp.route('/member/<member_id>', methods=['PATCH'])
@token_required
@role_required(Role.ADMIN)
def update_member(member_id: str):
    member = members.update(parse_id(member_id, 'member id'), json_body())
    return jsonify({
        'success': True,
        'message': 'User updated successfully',
        'user': member.to_dict()
    })


@members_bp.route('/member/<member_id>', methods=['DELETE'])
@token_required
@role_required(Role.ADMIN)
def delete_member(member_id: str):
    """Delete a member together with their transactions."""
    member = members.delete(parse_id(member_id, 'member id'))
    return jsonify({
        'success': True,
        'message': 'User deleted successfully',
        'user': member.to_dict()
    })


@members_bp.route('/members', methods=['GET'])
@token_required
@role_required(Role.ADMIN)
def list_members():
    """List one page of members, searchable by name, phone number and email."""
    limit, offset, search = parse_pagination()
    page = members.list(limit, offset, search)
    return jsonify({'success': True, **page.to_dict()})
