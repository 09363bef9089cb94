from datetime import datetime
from elibrary.extensions import db

ACTIVE_STATUSES = ("borrowed", "overdue")


class Borrow(db.Model):
    __tablename__ = "borrows"
    __table_args__ = (
        db.CheckConstraint("fine_amount >= 0", name="ck_borrows_fine_amount"),
        db.Index("ix_borrows_user_status", "user_id", "status"),
        db.Index("ix_borrows_book_status", "book_id", "status"),
        db.Index("ix_borrows_due_status", "due_date", "status"),
    )

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    borrow_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    due_date = db.Column(db.DateTime, nullable=False)
    return_date = db.Column(db.DateTime, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="borrowed")  # borrowed/returned/overdue

    fine_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fine_paid = db.Column(db.Boolean, nullable=False, default=False)
    fine_paid_date = db.Column(db.DateTime, nullable=True)

    renewal_count = db.Column(db.Integer, nullable=False, default=0)
    notes = db.Column(db.String(500), nullable=True)
    return_condition = db.Column(db.String(20), nullable=True)

    issued_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    returned_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", foreign_keys=[user_id], backref="borrows")
    book = db.relationship("Book", backref="borrows")
    issued_by = db.relationship("User", foreign_keys=[issued_by_id])
    returned_by = db.relationship("User", foreign_keys=[returned_by_id])

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def fine(self):
        return {
            "amount": float(self.fine_amount or 0),
            "paid": bool(self.fine_paid),
            "paid_date": self.fine_paid_date.isoformat() if self.fine_paid_date else None,
        }
