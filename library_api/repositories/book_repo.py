from sqlalchemy import func, select, update

from library_api.errors import AppError, ErrorKind
from library_api.models.book import Book


class BookRepo:
    """Envanter deposu. Commit etmez; transaction sınırı çağırana aittir."""

    def __init__(self, session):
        self.session = session

    def list_all(self):
        stmt = select(Book).order_by(Book.created_at.desc(), Book.id.desc())
        return self.session.execute(stmt).scalars().all()

    def get(self, book_id: int):
        return self.session.get(Book, book_id)

    def count(self) -> int:
        return self.session.execute(select(func.count(Book.id))).scalar_one()

    def add(self, book: Book):
        self.session.add(book)
        return book

    def delete(self, book: Book):
        self.session.delete(book)

    def decrement_stock_if_available(self, book_id: int):
        """
        Tek bir koşullu UPDATE ile "stock > 0 ise 1 düş".
        Etkilenen satır sayısı 0 ise ya kitap yok ya da stok bitmiş; hiçbir şey değişmez.

        return: (book, None) | (None, AppError)
        """
        result = self.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.stock > 0)
            .values(stock=Book.stock - 1)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 1:
            book = self.session.get(Book, book_id, populate_existing=True)
            return book, None

        book = self.session.get(Book, book_id)
        if book is None:
            return None, AppError(ErrorKind.NOT_FOUND, f"Book with ID {book_id} not found")
        return None, AppError(ErrorKind.OUT_OF_STOCK, f'Book "{book.title}" is currently out of stock')
