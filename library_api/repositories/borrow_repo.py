from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from library_api.models.borrow_record import BorrowRecord


class BorrowRepo:
    # sadece ekleme + okuma; update/delete yok

    def __init__(self, session):
        self.session = session

    def append(self, record: BorrowRecord):
        self.session.add(record)
        self.session.flush()
        return record

    def _ordered(self):
        return (
            select(BorrowRecord)
            .options(joinedload(BorrowRecord.book))
            .order_by(BorrowRecord.created_at.desc(), BorrowRecord.id.desc())
        )

    def list_all(self):
        return self.session.execute(self._ordered()).scalars().all()

    def list_by_user(self, user_id: int):
        stmt = self._ordered().where(BorrowRecord.user_id == user_id)
        return self.session.execute(stmt).scalars().all()

    def count(self) -> int:
        return self.session.execute(select(func.count(BorrowRecord.id))).scalar_one()
