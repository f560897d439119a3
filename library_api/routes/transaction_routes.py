"""Borrowing endpoints.

Members issue and return books for themselves; admins can act for any
member, extend due dates and remove transaction records.
"""
from flask import Blueprint, jsonify, request

from models.member import Role
from models.transaction import Transaction
from repositories.transaction_repository import TransactionRepository
from utils.decorators import (
    current_user_id,
    current_user_is_admin,
    role_required,
    token_required,
)
from utils.errors import Forbidden
from utils.request_utils import json_body, parse_id, parse_pagination

# Create transactions blueprint
transactions_bp = Blueprint('transactions', __name__)

transactions = TransactionRepository()


def _check_owner(transaction: Transaction) -> None:
    if not current_user_is_admin() and transaction.member_id != current_user_id():
        raise Forbidden('You do not have permission to access this transaction')


@transactions_bp.route('/transaction', methods=['POST'])
@token_required
def issue_book():
    """Issue a book.

    JSON payload:
        bookId: Book to borrow.
        memberId: Borrowing member; defaults to the caller. Only admins may
            issue for someone else.
        dueDays: Optional loan period in days.

    Returns:
        201 with the new transaction.
    """
    data = json_body()
    member_id = data.get('memberId', data.get('member_id'))
    if member_id is None:
        member_id = current_user_id()
    else:
        member_id = parse_id(member_id, 'member id')
    if not current_user_is_admin() and member_id != current_user_id():
        raise Forbidden('Members can only borrow books for themselves')
    data['memberId'] = member_id
    data.pop('member_id', None)

    transaction = transactions.create(data)
    return jsonify({
        'success': True,
        'message': 'Book issued',
        'transaction': transaction.to_dict()
    }), 201


@transactions_bp.route('/transaction/<transaction_id>', methods=['GET'])
@token_required
def get_transaction(transaction_id: str):
    transaction = transactions.get_by_id(parse_id(transaction_id, 'transaction id'))
    _check_owner(transaction)
    return jsonify({'success': True, 'transaction': transaction.to_dict()})


@transactions_bp.route('/transaction/<transaction_id>/return', methods=['PATCH'])
@token_required
def return_book(transaction_id: str):
    """Return an issued book.

    Returns:
        JSON response with the returned transaction, 409 if it was already
        returned.
    """
    transaction_id = parse_id(transaction_id, 'transaction id')
    _check_owner(transactions.get_by_id(transaction_id))

    transaction = transactions.return_book(transaction_id)
    return jsonify({
        'success': True,
        'message': 'Book returned',
        'transaction': transaction.to_dict()
    })


@transactions_bp.route('/transaction/<transaction_id>', methods=['PATCH'])
@token_required
@role_required(Role.ADMIN)
def update_transaction(transaction_id: str):
    """Change the due date of an issued transaction."""
    transaction = transactions.update(parse_id(transaction_id, 'transaction id'), json_body())
    return jsonify({
        'success': True,
        'message': 'Transaction updated',
        'transaction': transaction.to_dict()
    })


@transactions_bp.route('/transactions', methods=['GET'])
@token_required
def list_transactions():
    """List one page of transactions.

    Admins see every transaction and may filter with ``memberId``; members
    only ever see their own.

    Query params:
        limit, offset, searchText: Paging and a status search.
        memberId: Admin-only member filter.
        bookId: Book filter.
    """
    limit, offset, search = parse_pagination()

    if current_user_is_admin():
        member_id = request.args.get('memberId')
        member_id = parse_id(member_id, 'member id') if member_id is not None else None
    else:
        member_id = current_user_id()
    book_id = request.args.get('bookId')
    book_id = parse_id(book_id, 'book id') if book_id is not None else None

    page = transactions.list(limit, offset, search, member_id=member_id, book_id=book_id)
    return jsonify({'success': True, **page.to_dict()})


@transactions_bp.route('/transaction/<transaction_id>', methods=['DELETE'])
@token_required
@role_required(Role.ADMIN)
def delete_transaction(transaction_id: str):
    """Delete a transaction record; an outstanding loan's copy is restocked."""
    transaction = transactions.delete(parse_id(transaction_id, 'transaction id'))
    return jsonify({
        'success': True,
        'message': 'Transaction deleted',
        'transaction': transaction.to_dict()
    })
