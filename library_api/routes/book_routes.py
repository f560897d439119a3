"""Book catalogue endpoints.

Any authenticated member can browse and search the catalogue; only admins
add, change or remove books. Single-book routes take the id as the ``id``
query parameter.
"""
from flask import Blueprint, jsonify, request

from models.member import Role
from repositories.book_repository import BookRepository
from utils.decorators import role_required, token_required
from utils.request_utils import json_body, parse_id, parse_pagination

# Create books blueprint
books_bp = Blueprint('books', __name__)

books = BookRepository()


# ==================== Catalogue ====================

@books_bp.route('/books', methods=['GET'])
@token_required
def list_books():
    """List one page of books.

    Query params:
        limit: Page size, 10 by default.
        offset: Number of books to skip, 0 by default.
        searchText: Substring matched against title, author, publisher,
            genre and ISBN.

    Returns:
        JSON response with ``items`` and ``pagination``.
    """
    limit, offset, search = parse_pagination()
    page = books.list(limit, offset, search)
    return jsonify({'success': True, **page.to_dict()})


@books_bp.route('/book', methods=['GET'])
@token_required
def get_book():
    book = books.get_by_id(parse_id(request.args.get('id'), 'book id'))
    return jsonify({'success': True, 'book': book.to_dict()})


# ==================== Admin ====================

@books_bp.route('/book', methods=['POST'])
@token_required
@role_required(Role.ADMIN)
def create_book():
    """Add a book to the catalogue.

    Returns:
        201 with the stored book.
    """
    book = books.create(json_body())
    return jsonify({
        'success': True,
        'message': 'Book created',
        'book': book.to_dict()
    }), 201


@books_bp.route('/book', methods=['PATCH'])
@token_required
@role_required(Role.ADMIN)
def update_book():
    book_id = parse_id(request.args.get('id'), 'book id')
    book = books.update(book_id, json_body())
    return jsonify({
        'success': True,
        'message': 'Book updated',
        'book': book.to_dict()
    })


@books_bp.route('/book', methods=['DELETE'])
@token_required
@role_required(Role.ADMIN)
def delete_book():
    """Remove a book and, through the foreign key cascade, its transactions."""
    book = books.delete(parse_id(request.args.get('id'), 'book id'))
    return jsonify({
        'success': True,
        'message': 'Book deleted',
        'book': book.to_dict()
    })
