"""Transaction repository: issuing and returning books.

Issuing takes a copy off the shelf and records the loan in the same
database transaction; returning puts the copy back. Both sides use
conditional writes so the inventory can never go below zero or above the
number of copies owned.
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from flask import current_app
from pydantic import BaseModel
from sqlalchemy import select, update

from models.book import Book
from models.member import Member
from models.schemas import TransactionCreate, TransactionUpdate
from models.transaction import DATE_FORMAT, BookStatus, Transaction
from repositories.base import Repository, validate_payload
from utils.errors import ConflictError, NotFound

logger = logging.getLogger(__name__)


def _today() -> date:
    return date.today()


class TransactionRepository(Repository):
    """Persistence of ``Transaction`` rows and the inventory they move."""

    model = Transaction
    create_schema = TransactionCreate
    update_schema = TransactionUpdate
    search_columns = ('book_status',)
    entity_name = 'Transaction'

    def _filters(self, member_id: Optional[int] = None, book_id: Optional[int] = None,
                 **filters: Any) -> List[Any]:
        criteria = []
        if member_id is not None:
            criteria.append(Transaction.member_id == member_id)
        if book_id is not None:
            criteria.append(Transaction.book_id == book_id)
        return criteria

    def _prepare_update(self, current: Transaction, values: Dict[str, Any]) -> Dict[str, Any]:
        if not current.is_issued:
            raise ConflictError('Returned transactions cannot be changed')
        if values.get('due_date') and values['due_date'] < current.date_of_issue:
            raise ConflictError('Due date cannot be before the date of issue')
        return values

    def _before_delete(self, entity: Transaction) -> None:
        # An outstanding loan's copy goes back on the shelf with the record.
        if entity.is_issued:
            self.restock(entity.book_id)

    def restock(self, book_id: int) -> bool:
        """Put one copy back on the shelf, never above the total owned.

        Runs inside the caller's unit of work; nothing is committed here.
        """
        result = self.session.execute(
            update(Book)
            .where(Book.id == book_id,
                   Book.available_num_of_copies < Book.total_num_of_copies)
            .values({Book.available_num_of_copies: Book.available_num_of_copies + 1})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning('Book %s already fully stocked; copy not added back', book_id)
            return False
        return True

    def create(self, data: Dict[str, Any]) -> Transaction:
        """Validate an issue request and issue the book.

        Raises:
            ValidationError: If the payload is malformed.
            NotFound: If the member or book does not exist.
            ConflictError: If no copy is available.
        """
        payload: BaseModel = validate_payload(self.create_schema, data)
        return self.issue(payload.member_id, payload.book_id, payload.due_days)

    def issue(self, member_id: int, book_id: int, due_days: Optional[int] = None) -> Transaction:
        """Issue one copy of a book to a member.

        Args:
            member_id: Borrowing member.
            book_id: Book to take off the shelf.
            due_days: Loan period, ``BORROW_DURATION_DAYS`` by default.

        Returns:
            The new ``issued`` transaction.

        Raises:
            NotFound: If the member or book does not exist.
            ConflictError: If no copy is available.
        """
        if due_days is None:
            due_days = current_app.config['BORROW_DURATION_DAYS']
        today = _today()

        with self._writing():
            if self.session.get(Member, member_id) is None:
                raise NotFound('Member not found')

            result = self.session.execute(
                update(Book)
                .where(Book.id == book_id, Book.available_num_of_copies > 0)
                .values({Book.available_num_of_copies: Book.available_num_of_copies - 1})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                if self.session.get(Book, book_id) is None:
                    raise NotFound('Book not found')
                raise ConflictError('No copies of this book are available')

            transaction = Transaction(
                member_id=member_id,
                book_id=book_id,
                book_status=BookStatus.ISSUED.value,
                date_of_issue=today.strftime(DATE_FORMAT),
                due_date=(today + timedelta(days=due_days)).strftime(DATE_FORMAT),
            )
            self.session.add(transaction)

        logger.info('Book %s issued to member %s (transaction %s)', book_id, member_id, transaction.id)
        return transaction

    def return_book(self, transaction_id: int) -> Transaction:
        """Mark a transaction returned and put the copy back on the shelf.

        Raises:
            NotFound: If the transaction does not exist.
            ConflictError: If the book was already returned.
        """
        transaction = self.get_by_id(transaction_id)
        book_id = transaction.book_id

        with self._writing():
            result = self.session.execute(
                update(Transaction)
                .where(Transaction.id == transaction_id,
                       Transaction.book_status == BookStatus.ISSUED.value)
                .values({
                    Transaction.book_status: BookStatus.RETURNED.value,
                    Transaction.return_date: _today().strftime(DATE_FORMAT),
                })
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise ConflictError('Book has already been returned')
            self.restock(book_id)

        logger.info('Transaction %s returned', transaction_id)
        return self.get_by_id(transaction_id)

    def overdue(self, today: Optional[str] = None) -> List[Transaction]:
        """List issued transactions past their due date.

        Args:
            today: Reference date as ``YYYY-MM-DD``; the current date by default.
        """
        today = today or _today().strftime(DATE_FORMAT)
        return list(self.session.scalars(
            select(Transaction)
            .where(Transaction.book_status == BookStatus.ISSUED.value,
                   Transaction.due_date < today)
            .order_by(Transaction.due_date)
        ).all())
