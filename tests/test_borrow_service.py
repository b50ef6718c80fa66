import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from library_api.errors import ErrorKind
from library_api.extensions import db
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.borrow_repo import BorrowRepo
from library_api.services.borrow_service import BorrowService


def _payload(book_id, latitude=41.0082, longitude=28.9784):
    return {"bookId": book_id, "latitude": latitude, "longitude": longitude}


class ExplodingLedger(BorrowRepo):
    def __init__(self, session, exc):
        super().__init__(session)
        self.exc = exc

    def append(self, record):
        raise self.exc


def test_borrow_decrements_and_appends(app, make_book, stock_of, ledger_rows):
    book_id = make_book(stock=2)
    with app.app_context():
        outcome, err = BorrowService(db.session).borrow(10, _payload(book_id))
    assert err is None
    assert outcome.book.stock == 1
    assert outcome.record.user_id == 10
    assert outcome.record.borrow_date is not None
    assert stock_of(book_id) == 1
    assert ledger_rows() == [(10, book_id, 41.0082, 28.9784)]


def test_invalid_payload_never_touches_storage(app):
    books = Mock(spec=BookRepo)
    ledger = Mock(spec=BorrowRepo)
    session = Mock()
    with app.app_context():
        outcome, err = BorrowService(session, books=books, ledger=ledger).borrow(10, _payload(1, latitude=95))
    assert outcome is None
    assert err.kind is ErrorKind.VALIDATION
    books.decrement_stock_if_available.assert_not_called()
    ledger.append.assert_not_called()
    session.commit.assert_not_called()


def test_unknown_book_leaves_ledger_empty(app, ledger_count):
    with app.app_context():
        _, err = BorrowService(db.session).borrow(10, _payload(999))
    assert err.kind is ErrorKind.NOT_FOUND
    assert ledger_count() == 0


def test_out_of_stock_names_the_book(app, make_book, ledger_count):
    book_id = make_book(title="Dune", stock=0)
    with app.app_context():
        _, err = BorrowService(db.session).borrow(10, _payload(book_id))
    assert err.kind is ErrorKind.OUT_OF_STOCK
    assert "Dune" in err.message
    assert ledger_count() == 0


def test_storage_failure_after_decrement_rolls_back(app, make_book, stock_of, ledger_count):
    book_id = make_book(stock=3)
    failure = OperationalError("INSERT INTO borrow_logs", {}, Exception("disk I/O error"))
    with app.app_context():
        service = BorrowService(db.session, ledger=ExplodingLedger(db.session, failure))
        outcome, err = service.borrow(10, _payload(book_id))
    assert outcome is None
    assert err.kind is ErrorKind.TRANSACTION_FAILURE
    assert err.status_code == 500
    assert stock_of(book_id) == 3
    assert ledger_count() == 0


def test_unexpected_error_rolls_back_before_propagating(app, make_book, stock_of, ledger_count):
    book_id = make_book(stock=2)
    with app.app_context():
        service = BorrowService(db.session, ledger=ExplodingLedger(db.session, RuntimeError("driver blew up")))
        with pytest.raises(RuntimeError):
            service.borrow(10, _payload(book_id))
        assert not db.session.in_transaction()
    assert stock_of(book_id) == 2
    assert ledger_count() == 0


def test_integrity_error_maps_to_conflict_and_rolls_back(app, make_book, stock_of, ledger_count):
    book_id = make_book(stock=1)
    failure = IntegrityError("INSERT INTO borrow_logs", {}, Exception("UNIQUE constraint failed"))
    with app.app_context():
        service = BorrowService(db.session, ledger=ExplodingLedger(db.session, failure))
        _, err = service.borrow(10, _payload(book_id))
    assert err.kind is ErrorKind.CONFLICT
    assert stock_of(book_id) == 1
    assert ledger_count() == 0


def test_concurrent_borrows_never_oversell(app, make_book, stock_of, ledger_count):
    stock, attempts = 3, 8
    book_id = make_book(stock=stock)
    barrier = threading.Barrier(attempts)

    def attempt(user_id):
        with app.app_context():
            barrier.wait()
            _, err = BorrowService(db.session).borrow(user_id, _payload(book_id))
            return err.kind if err else None

    with ThreadPoolExecutor(max_workers=attempts) as pool:
        results = list(pool.map(attempt, range(1, attempts + 1)))

    assert results.count(None) == stock
    assert results.count(ErrorKind.OUT_OF_STOCK) == attempts - stock
    assert stock_of(book_id) == 0
    assert ledger_count() == stock


def test_ledger_count_only_grows(app, make_book, ledger_count):
    book_id = make_book(stock=2)
    counts = [ledger_count()]
    for user_id, payload in ((1, _payload(book_id)), (2, _payload(book_id, latitude=100)),
                             (3, _payload(book_id)), (4, _payload(book_id))):
        with app.app_context():
            BorrowService(db.session).borrow(user_id, payload)
        counts.append(ledger_count())
    assert counts == sorted(counts)
    assert counts[-1] == 2
