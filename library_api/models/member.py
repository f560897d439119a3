"""Member model module.

Members are the library's users. Each member has a role that gates access to
administrative routes and holds at most one active refresh token.
"""
import enum
from typing import Any, Dict

from extensions import db


class Role(str, enum.Enum):
    """Closed set of member roles."""

    USER = 'user'
    ADMIN = 'admin'


class Member(db.Model):
    """Represents a library member.

    Attributes:
        id (int): Unique identifier for the member.
        name (str): Full name.
        age (int): Age in years.
        phone_number (str): Phone number, unique across members.
        email (str): Email address, unique across members.
        address (str): Postal address.
        password (str): Hashed password, never the plaintext.
        role (str): ``user`` or ``admin``.
        refresh_token (str): Currently active refresh token, if logged in.
    """

    __tablename__ = 'members'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(35), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    phone_number = db.Column('phoneNumber', db.String(35), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    address = db.Column(db.String(255), nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(Role, name='member_role', values_callable=lambda roles: [r.value for r in roles],
                validate_strings=True),
        nullable=False,
        default=Role.USER,
    )
    refresh_token = db.Column('refreshToken', db.String(512), unique=True, nullable=True)

    transactions = db.relationship(
        'Transaction',
        back_populates='member',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    def is_admin(self) -> bool:
        """Check if member is an admin."""
        return self.role == Role.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        """Convert member to dictionary, without password or tokens."""
        return {
            'id': self.id,
            'name': self.name,
            'age': self.age,
            'phoneNumber': self.phone_number,
            'email': self.email,
            'address': self.address,
            'role': Role(self.role).value,
        }

    def __repr__(self) -> str:
        return f'<Member {self.id} {self.email}>'
