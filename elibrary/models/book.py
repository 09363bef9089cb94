from datetime import datetime
from elibrary.extensions import db

CATEGORIES = (
    "Fiction",
    "Non-Fiction",
    "Science",
    "Technology",
    "History",
    "Biography",
    "Education",
    "Literature",
    "Business",
    "Health",
    "Arts",
    "Religion",
    "Philosophy",
    "Other",
)


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        db.CheckConstraint("total_copies >= 1", name="ck_books_total_copies"),
        db.CheckConstraint(
            "available_copies >= 0 AND available_copies <= total_copies",
            name="ck_books_available_copies",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author = db.Column(db.String(100), nullable=False, index=True)
    isbn = db.Column(db.String(32), unique=True, nullable=False, index=True)
    publisher = db.Column(db.String(100), nullable=False)
    published_year = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(30), nullable=False, index=True)
    description = db.Column(db.String(1000), nullable=True)
    language = db.Column(db.String(50), nullable=False, default="English")
    pages = db.Column(db.Integer, nullable=True)
    cover_image = db.Column(db.String(500), nullable=False, default="")

    total_copies = db.Column(db.Integer, nullable=False, default=1)
    available_copies = db.Column(db.Integer, nullable=False, default=1)

    shelf = db.Column(db.String(50), nullable=False)
    section = db.Column(db.String(50), nullable=False)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    added_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    added_by = db.relationship("User")

    @property
    def location(self):
        return {"shelf": self.shelf, "section": self.section}

    @property
    def copies_on_loan(self) -> int:
        return self.total_copies - self.available_copies
