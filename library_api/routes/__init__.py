"""Routes package initialization.

This module exports all blueprints for registration in the main app.

Blueprint organization:
    - auth_bp: Authentication (register, login, logout, refresh)
    - books_bp: Book catalogue
    - members_bp: Member profiles
    - transactions_bp: Issuing and returning books
"""
from routes.auth_routes import auth_bp
from routes.book_routes import books_bp
from routes.member_routes import members_bp
from routes.transaction_routes import transactions_bp

__all__ = [
    'auth_bp',
    'books_bp',
    'members_bp',
    'transactions_bp',
]
