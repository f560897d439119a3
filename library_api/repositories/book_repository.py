"""Book repository: catalog entries and their inventory counts."""
from typing import Any, Dict

from models.book import Book
from models.schemas import BookCreate, BookUpdate
from repositories.base import Repository
from utils.errors import ValidationError


class BookRepository(Repository):
    """Persistence of ``Book`` rows.

    Keeps ``0 <= availableNumOfCopies <= totalNumOfCopies`` on every write.
    """

    model = Book
    create_schema = BookCreate
    update_schema = BookUpdate
    search_columns = ('title', 'author', 'publisher', 'genre', 'isbn_no')
    entity_name = 'Book'
    unique_message = 'A book with this ISBN already exists'

    def _prepare_update(self, current: Book, values: Dict[str, Any]) -> Dict[str, Any]:
        total = values.get('total_num_of_copies', current.total_num_of_copies)
        available = values.get('available_num_of_copies', current.available_num_of_copies)
        if available > total:
            raise ValidationError('Available copies cannot exceed total copies')
        return values
