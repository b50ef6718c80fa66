import pytest

from library_api import create_app
from library_api.config import TestConfig
from library_api.extensions import db
from library_api.models.book import Book
from library_api.models.borrow_record import BorrowRecord
from library_api.repositories.borrow_repo import BorrowRepo

USER_HEADERS = {"x-user-role": "user", "x-user-id": "10"}
ADMIN_HEADERS = {"x-user-role": "admin"}


@pytest.fixture
def app(tmp_path):
    # thread'li testler için dosya tabanlı SQLite
    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'library_test.db'}"

    app = create_app(_Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_book(app):
    def _make(title="Dune", author="Frank Herbert", stock=1):
        with app.app_context():
            book = Book(title=title, author=author, stock=stock)
            db.session.add(book)
            db.session.commit()
            return book.id
    return _make


@pytest.fixture
def stock_of(app):
    def _stock(book_id):
        with app.app_context():
            book = db.session.get(Book, book_id)
            return book.stock if book else None
    return _stock


@pytest.fixture
def ledger_count(app):
    def _count():
        with app.app_context():
            return BorrowRepo(db.session).count()
    return _count


@pytest.fixture
def ledger_rows(app):
    def _rows():
        with app.app_context():
            return [
                (r.user_id, r.book_id, r.latitude, r.longitude)
                for r in db.session.query(BorrowRecord).order_by(BorrowRecord.id).all()
            ]
    return _rows
