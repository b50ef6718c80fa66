from flask import current_app
from sqlalchemy.exc import IntegrityError

from library_api.db_objects import begin_write
from library_api.errors import AppError, ErrorKind
from library_api.models.book import Book
from library_api.repositories.book_repo import BookRepo
from library_api.utils.validators import parse_path_id, validate_book_payload


class BookService:
    def __init__(self, session, books=None):
        self.session = session
        self.books = books or BookRepo(session)

    def list_books(self):
        return self.books.list_all()

    def get_book(self, raw_id):
        book_id, err = parse_path_id(raw_id)
        if err:
            return None, err
        book = self.books.get(book_id)
        if not book:
            return None, AppError(ErrorKind.NOT_FOUND, f"Book with ID {book_id} not found")
        return book, None

    def _commit(self):
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            current_app.logger.warning(f"[BookService] integrity error: {e}")
            return AppError(ErrorKind.CONFLICT, "Duplicate Entry")
        except Exception:
            self.session.rollback()
            raise
        return None

    def create_book(self, payload):
        data, err = validate_book_payload(payload)
        if err:
            return None, err

        begin_write(self.session)
        book = Book(title=data["title"], author=data["author"], stock=data["stock"])
        self.books.add(book)
        err = self._commit()
        if err:
            return None, err
        current_app.logger.info(f"[BookService] created book {book.id} ({book.title!r}, stock {book.stock})")
        return book, None

    def update_book(self, raw_id, payload):
        begin_write(self.session)
        book, err = self.get_book(raw_id)
        if err:
            return None, err

        data, err = validate_book_payload(payload, partial=True)
        if err:
            return None, err

        for key, value in data.items():
            setattr(book, key, value)

        err = self._commit()
        if err:
            return None, err
        current_app.logger.info(f"[BookService] updated book {book.id}: {sorted(data)}")
        return book, None

    def delete_book(self, raw_id):
        begin_write(self.session)
        book, err = self.get_book(raw_id)
        if err:
            return None, err

        snapshot = book.to_dict()
        # borrow_logs satırları FK cascade ile silinir
        self.books.delete(book)
        err = self._commit()
        if err:
            return None, err
        current_app.logger.info(f"[BookService] deleted book {snapshot['id']} and its borrow history")
        return snapshot, None
