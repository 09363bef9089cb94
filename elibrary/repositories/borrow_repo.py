from datetime import datetime
from elibrary.models.borrow import Borrow, ACTIVE_STATUSES
from elibrary.extensions import db


class BorrowRepo:
    @staticmethod
    def get(borrow_id: int):
        return db.session.get(Borrow, borrow_id)

    @staticmethod
    def list_by_user(user_id: int):
        return Borrow.query.filter_by(user_id=user_id).order_by(Borrow.borrow_date.desc(), Borrow.id.desc()).all()

    @staticmethod
    def recent_by_user(user_id: int, limit: int = 10):
        return (
            Borrow.query.filter_by(user_id=user_id)
            .order_by(Borrow.borrow_date.desc(), Borrow.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def query_all(status: str | None = None, overdue_at: datetime | None = None):
        q = Borrow.query
        if status:
            q = q.filter(Borrow.status == status)
        if overdue_at is not None:
            q = q.filter(Borrow.due_date < overdue_at, Borrow.status.in_(ACTIVE_STATUSES))
        return q.order_by(Borrow.borrow_date.desc(), Borrow.id.desc())

    @staticmethod
    def find_active_for(user_id: int, book_id: int):
        return Borrow.query.filter(
            Borrow.user_id == user_id,
            Borrow.book_id == book_id,
            Borrow.status.in_(ACTIVE_STATUSES),
        ).first()

    @staticmethod
    def count_active_for_user(user_id: int) -> int:
        return Borrow.query.filter(
            Borrow.user_id == user_id,
            Borrow.status.in_(ACTIVE_STATUSES),
        ).count()

    @staticmethod
    def count_by_status(*statuses: str) -> int:
        q = Borrow.query
        if statuses:
            q = q.filter(Borrow.status.in_(statuses))
        return q.count()

    @staticmethod
    def create(borrow: Borrow):
        db.session.add(borrow)
        return borrow

    @staticmethod
    def commit():
        db.session.commit()

    @staticmethod
    def find_overdue(now: datetime):
        return Borrow.query.filter(
            Borrow.status.in_(ACTIVE_STATUSES),
            Borrow.due_date < now,
        ).order_by(Borrow.due_date.asc()).all()

    @staticmethod
    def find_due_between(start: datetime, end: datetime, status: str = "borrowed"):
        return Borrow.query.filter(
            Borrow.status == status,
            Borrow.due_date >= start,
            Borrow.due_date <= end,
        ).order_by(Borrow.due_date.asc()).all()

    @staticmethod
    def count_due_between(start: datetime, end: datetime, status: str = "borrowed") -> int:
        return Borrow.query.filter(
            Borrow.status == status,
            Borrow.due_date >= start,
            Borrow.due_date <= end,
        ).count()

    @staticmethod
    def find_due_before(limit_date: datetime, limit: int = 5):
        return (
            Borrow.query.filter(Borrow.status == "borrowed", Borrow.due_date <= limit_date)
            .order_by(Borrow.due_date.asc())
            .limit(limit)
            .all()
        )
