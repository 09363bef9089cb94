from datetime import datetime
from elibrary.extensions import db

# Kullanıcının şu an elinde olan ödünç kayıtları
user_borrowed_books = db.Table(
    "user_borrowed_books",
    db.Column("user_id", db.Integer, db.ForeignKey("users.id"), primary_key=True),
    db.Column("borrow_id", db.Integer, db.ForeignKey("borrows.id"), primary_key=True),
)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(20), nullable=False, default="user")  # admin/user
    student_id = db.Column(db.String(50), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    address = db.Column(db.String(200), nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    borrowed_books = db.relationship("Borrow", secondary=user_borrowed_books, lazy="select")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
