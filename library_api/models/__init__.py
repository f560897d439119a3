"""
Models package

Entities:
    Member - Library members, with role and refresh token (member.py)
    Book - Catalog entries with inventory counts (book.py)
    Transaction - A book issued to a member (transaction.py)

Request payload schemas live in schemas.py.
"""
from models.member import Member, Role
from models.book import Book
from models.transaction import BookStatus, Transaction

__all__ = [
    'Member', 'Role',
    'Book',
    'Transaction', 'BookStatus',
]
