# library_api/services/borrow_service.py
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import NamedTuple

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from library_api.db_objects import begin_write
from library_api.errors import AppError, ErrorKind
from library_api.models.book import Book
from library_api.models.borrow_record import BorrowRecord
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.borrow_repo import BorrowRepo
from library_api.utils.validators import validate_borrow_payload


class BorrowState(str, Enum):
    STARTED = "Started"
    VALIDATING = "Validating"
    REJECTED = "Rejected"
    LOCKING = "Locking"
    DECREMENTED = "Decremented"
    LOGGED = "Logged"
    COMMITTED = "Committed"
    ABORTED = "Aborted"


class BorrowOutcome(NamedTuple):
    book: Book
    record: BorrowRecord


class BorrowService:
    """
    Ödünç alma = tek atomik birim:
      stok kontrol + stok düş (koşullu UPDATE) + defter kaydı ekle -> commit.
    Herhangi bir adım başarısız olursa session tamamen rollback edilir.
    """

    def __init__(self, session, books: BookRepo | None = None, ledger: BorrowRepo | None = None):
        self.session = session
        self.books = books or BookRepo(session)
        self.ledger = ledger or BorrowRepo(session)

    @staticmethod
    def _trace(user_id, book_id, state: BorrowState):
        current_app.logger.debug(f"[BorrowService] user={user_id} book={book_id} -> {state.value}")

    def _abort(self, user_id, book_id, err: AppError):
        self.session.rollback()
        self._trace(user_id, book_id, BorrowState.ABORTED)
        return None, err

    def borrow(self, user_id: int, payload) -> tuple[BorrowOutcome | None, AppError | None]:
        book_id = payload.get("bookId") if isinstance(payload, dict) else None
        self._trace(user_id, book_id, BorrowState.STARTED)

        self._trace(user_id, book_id, BorrowState.VALIDATING)
        data, err = validate_borrow_payload(payload)
        if err:
            self._trace(user_id, book_id, BorrowState.REJECTED)
            return None, err

        book_id = data["book_id"]
        try:
            begin_write(self.session)
            self._trace(user_id, book_id, BorrowState.LOCKING)
            book, err = self.books.decrement_stock_if_available(book_id)
            if err:
                current_app.logger.warning(f"[BorrowService] borrow refused: {err.kind.value} ({err.message})")
                return self._abort(user_id, book_id, err)
            self._trace(user_id, book_id, BorrowState.DECREMENTED)

            record = self.ledger.append(BorrowRecord(
                user_id=user_id,
                book_id=book_id,
                borrow_date=datetime.now(timezone.utc).date(),
                latitude=data["latitude"],
                longitude=data["longitude"],
            ))
            self._trace(user_id, book_id, BorrowState.LOGGED)

            self.session.commit()
        except IntegrityError as e:
            current_app.logger.error(f"[BorrowService] integrity error, rolled back: {e}")
            return self._abort(user_id, book_id, AppError(ErrorKind.CONFLICT, "Borrow conflicts with existing data"))
        except SQLAlchemyError as e:
            current_app.logger.exception(f"[BorrowService] transaction failed, rolled back: {e}")
            return self._abort(user_id, book_id, AppError(ErrorKind.TRANSACTION_FAILURE, "Borrow transaction failed"))
        except Exception:
            # sarmalanmamış sürücü hataları: önce rollback, sonra yukarı
            self.session.rollback()
            self._trace(user_id, book_id, BorrowState.ABORTED)
            raise

        self._trace(user_id, book_id, BorrowState.COMMITTED)
        current_app.logger.info(
            f"[BorrowService] user {user_id} borrowed book {book_id} (remaining stock {book.stock})"
        )
        return BorrowOutcome(book=book, record=record), None

    def list_logs(self):
        return self.ledger.list_all()

    def list_user_logs(self, user_id: int):
        return self.ledger.list_by_user(user_id)
