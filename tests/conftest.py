import pytest

from app import create_app
from config.config import TestingConfig
from extensions import db
from models.member import Role
from repositories.book_repository import BookRepository
from repositories.member_repository import MemberRepository
from repositories.transaction_repository import TransactionRepository
from utils.auth_utils import generate_access_token

PASSWORD = "correct-horse-9"


def member_data(n: int = 1, **overrides):
    data = {
        "name": f"Member {n}",
        "age": 30,
        "phoneNumber": f"07000000{n:03d}",
        "email": f"member{n}@library.org",
        "address": f"{n} Reading Lane",
        "password": PASSWORD,
    }
    data.update(overrides)
    return data


def book_data(n: int = 1, **overrides):
    data = {
        "title": f"Book {n}",
        "author": "Ann Author",
        "publisher": "Paper House",
        "genre": "Fiction",
        "isbnNo": f"9780000000{n:03d}",
        "numOfPages": 320,
        "totalNumOfCopies": 3,
        "availableNumOfCopies": 3,
    }
    data.update(overrides)
    return data


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def members():
    return MemberRepository()


@pytest.fixture
def books():
    return BookRepository()


@pytest.fixture
def transactions():
    return TransactionRepository()


@pytest.fixture
def admin(app):
    with app.app_context():
        member = MemberRepository().create(
            member_data(900, name="Ada Admin", role=Role.ADMIN.value)
        )
        return {"id": member.id, "token": generate_access_token(member.id, Role.ADMIN.value)}


@pytest.fixture
def member(app):
    with app.app_context():
        member = MemberRepository().create(member_data(1))
        return {"id": member.id, "token": generate_access_token(member.id, Role.USER.value)}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {admin['token']}"}


@pytest.fixture
def member_headers(member):
    return {"Authorization": f"Bearer {member['token']}"}


@pytest.fixture
def book_id(app):
    with app.app_context():
        return BookRepository().create(book_data(1)).id
