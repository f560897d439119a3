"""Repositories package.

One repository per entity, sharing the contract defined in base.py.
"""
from repositories.base import PagedResult, Repository, validate_payload
from repositories.book_repository import BookRepository
from repositories.member_repository import MemberRepository
from repositories.transaction_repository import TransactionRepository

__all__ = [
    'PagedResult', 'Repository', 'validate_payload',
    'BookRepository', 'MemberRepository', 'TransactionRepository',
]
