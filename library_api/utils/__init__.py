"""Utilities package for the library management API.

This package contains the credential helpers, route decorators, error
types and request parsing helpers used across the application.
"""
from utils.decorators import role_required, token_required

__all__ = [
    'role_required',
    'token_required',
]
