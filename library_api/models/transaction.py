"""Transaction model: one borrow event of a book by a member."""
import enum
from typing import Any, Dict

from extensions import db


class BookStatus(str, enum.Enum):
    ISSUED = 'issued'
    RETURNED = 'returned'


DATE_FORMAT = '%Y-%m-%d'


class Transaction(db.Model):
    """A book issued to a member.

    Dates are stored as ISO ``YYYY-MM-DD`` strings, which keeps them
    comparable with plain string ordering.

    Attributes:
        id (int): Unique identifier for the transaction.
        member_id (int): Borrowing member.
        book_id (int): Borrowed book.
        book_status (str): ``issued`` or ``returned``.
        date_of_issue (str): Date the book was issued.
        due_date (str): Date the book must be returned by.
        return_date (str): Date the book was returned, if it was.
    """

    __tablename__ = 'transactions'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(
        'memberId', db.Integer, db.ForeignKey('members.id', ondelete='CASCADE'), nullable=False, index=True
    )
    book_id = db.Column(
        'bookId', db.Integer, db.ForeignKey('books.id', ondelete='CASCADE'), nullable=False, index=True
    )
    book_status = db.Column('bookStatus', db.String(35), nullable=False, default=BookStatus.ISSUED.value)
    date_of_issue = db.Column('dateOfIssue', db.String(15), nullable=False)
    due_date = db.Column('dueDate', db.String(15), nullable=False)
    return_date = db.Column('returnDate', db.String(15), nullable=True)

    member = db.relationship('Member', back_populates='transactions')
    book = db.relationship('Book', back_populates='transactions')

    @property
    def is_issued(self) -> bool:
        """Return True if the book has not been returned yet."""
        return self.book_status == BookStatus.ISSUED.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'memberId': self.member_id,
            'bookId': self.book_id,
            'bookStatus': self.book_status,
            'dateOfIssue': self.date_of_issue,
            'dueDate': self.due_date,
            'returnDate': self.return_date,
        }

    def __repr__(self) -> str:
        return f'<Transaction {self.id} {self.book_status}>'
