from library_api.extensions import db
from library_api.models.book import utcnow


class BorrowRecord(db.Model):
    """Ödünç defteri satırı. Oluşturulduktan sonra değişmez."""

    __tablename__ = "borrow_logs"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, nullable=False, index=True)
    book_id = db.Column(
        db.Integer,
        db.ForeignKey("books.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    borrow_date = db.Column(db.Date, nullable=False, index=True)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    # kitap silinirse geçmişi de gider
    book = db.relationship(
        "Book",
        backref=db.backref(
            "borrow_records",
            cascade="all, delete-orphan",
            passive_deletes=True,
        ),
    )

    def to_dict(self, include_book=False):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "bookId": self.book_id,
            "borrowDate": self.borrow_date.isoformat() if self.borrow_date else None,
            "location": {
                "latitude": self.latitude,
                "longitude": self.longitude,
            },
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_book:
            data["book"] = self.book.summary() if self.book else None
        return data
