from datetime import datetime, timezone
from library_api.extensions import db


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        # stok asla negatif olamaz (DB seviyesinde de)
        db.CheckConstraint("stock >= 0", name="ck_books_stock_nonnegative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    author = db.Column(db.String(255), nullable=False, index=True)

    stock = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "stock": self.stock,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def summary(self):
        return {"id": self.id, "title": self.title, "author": self.author}

    def __repr__(self):
        return f"<Book {self.id} {self.title!r} stock={self.stock}>"
