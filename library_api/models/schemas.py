"""Request payload schemas.

Field names are snake_case to match the ORM attributes; the JSON API uses
camelCase aliases (``phoneNumber``, ``isbnNo``...), both spellings are
accepted on input.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from models.member import Role


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
        str_strip_whitespace=True,
    )


class _PartialSchema(_Schema):
    """Partial update: omitted fields are left alone, explicit nulls are refused."""

    @model_validator(mode='after')
    def reject_nulls(self):
        for name in sorted(self.model_fields_set):
            if getattr(self, name) is None:
                raise ValueError(f'{to_camel(name)} cannot be null')
        return self


def _normalize_email(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else value


# ==================== Members ====================

class MemberCreate(_Schema):
    """Registration payload for a new member."""

    name: str = Field(min_length=3, description='Full name')
    age: int = Field(ge=5, le=100, description='Age in years')
    phone_number: str = Field(min_length=10, max_length=12)
    email: EmailStr
    address: str = Field(min_length=5)
    password: str = Field(min_length=8, description='Plain text password (will be hashed)')
    role: Role = Role.USER

    lower_email = field_validator('email')(_normalize_email)


class MemberUpdate(_PartialSchema):
    """Partial update of a member; every field may be omitted but not nulled."""

    name: Optional[str] = Field(None, min_length=3)
    age: Optional[int] = Field(None, ge=5, le=100)
    phone_number: Optional[str] = Field(None, min_length=10, max_length=12)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, min_length=5)
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[Role] = None

    lower_email = field_validator('email')(_normalize_email)


class LoginInput(_Schema):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


# ==================== Books ====================

class BookCreate(_Schema):
    """Payload for adding a book to the catalog."""

    title: str = Field(min_length=1, max_length=35)
    author: str = Field(min_length=1, max_length=35)
    publisher: str = Field(min_length=1, max_length=35)
    genre: str = Field(min_length=1, max_length=35)
    isbn_no: str = Field(min_length=10, max_length=13)
    num_of_pages: int = Field(ge=1)
    total_num_of_copies: int = Field(ge=0)
    available_num_of_copies: int = Field(ge=0)

    @model_validator(mode='after')
    def check_inventory(self) -> 'BookCreate':
        if self.available_num_of_copies > self.total_num_of_copies:
            raise ValueError('Available copies cannot exceed total copies')
        return self


class BookUpdate(_PartialSchema):
    """Partial update of a book; inventory is re-checked against the stored row."""

    title: Optional[str] = Field(None, min_length=1, max_length=35)
    author: Optional[str] = Field(None, min_length=1, max_length=35)
    publisher: Optional[str] = Field(None, min_length=1, max_length=35)
    genre: Optional[str] = Field(None, min_length=1, max_length=35)
    isbn_no: Optional[str] = Field(None, min_length=10, max_length=13)
    num_of_pages: Optional[int] = Field(None, ge=1)
    total_num_of_copies: Optional[int] = Field(None, ge=0)
    available_num_of_copies: Optional[int] = Field(None, ge=0)


# ==================== Transactions ====================

class TransactionCreate(_Schema):
    """Issue request: which member borrows which book, and for how long."""

    member_id: int = Field(ge=1)
    book_id: int = Field(ge=1)
    due_days: Optional[int] = Field(None, ge=1, le=365)


class TransactionUpdate(_PartialSchema):
    due_date: Optional[str] = Field(None, pattern=r'^\d{4}-\d{2}-\d{2}$')

    @field_validator('due_date')
    @classmethod
    def check_calendar_date(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                date.fromisoformat(value)
            except ValueError:
                raise ValueError(f'{value} is not a calendar date') from None
        return value
