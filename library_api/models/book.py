"""Book model module.

This module defines the Book model for managing library books
in the system.
"""
from typing import Any, Dict

from extensions import db


class Book(db.Model):
    """Represents a book in the library system.

    Attributes:
        id (int): Unique identifier for the book.
        title (str): Book title.
        author (str): Book author name.
        publisher (str): Publisher name.
        genre (str): Book genre.
        isbn_no (str): ISBN number, unique across books.
        num_of_pages (int): Number of pages.
        total_num_of_copies (int): Total number of copies owned.
        available_num_of_copies (int): Number of copies currently on the shelf.
    """

    __tablename__ = 'books'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(35), nullable=False)
    author = db.Column(db.String(35), nullable=False)
    publisher = db.Column(db.String(35), nullable=False)
    genre = db.Column(db.String(35), nullable=False)
    isbn_no = db.Column('isbnNo', db.String(13), unique=True, nullable=False)
    num_of_pages = db.Column('numOfPages', db.Integer, nullable=False)
    total_num_of_copies = db.Column('totalNumOfCopies', db.Integer, nullable=False)
    available_num_of_copies = db.Column('availableNumOfCopies', db.Integer, nullable=False)

    __table_args__ = (
        db.CheckConstraint(available_num_of_copies >= 0, name='ck_books_available_non_negative'),
        db.CheckConstraint(available_num_of_copies <= total_num_of_copies, name='ck_books_available_le_total'),
    )

    transactions = db.relationship(
        'Transaction',
        back_populates='book',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert book to dictionary representation.

        Returns:
            Dictionary containing all book attributes.
        """
        return {
            'id': self.id,
            'title': self.title,
            'author': self.author,
            'publisher': self.publisher,
            'genre': self.genre,
            'isbnNo': self.isbn_no,
            'numOfPages': self.num_of_pages,
            'totalNumOfCopies': self.total_num_of_copies,
            'availableNumOfCopies': self.available_num_of_copies,
        }

    def __repr__(self) -> str:
        return f'<Book {self.id} {self.isbn_no}>'
