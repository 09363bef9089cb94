from datetime import datetime
from elibrary.extensions import db

REPORT_REASONS = ("inappropriate", "spam", "offensive", "fake", "other")


class Review(db.Model):
    __tablename__ = "reviews"
    __table_args__ = (
        # kullanıcı başına kitap başına tek yorum
        db.UniqueConstraint("user_id", "book_id", name="uq_reviews_user_book"),
        db.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating"),
        db.Index("ix_reviews_book_approved", "book_id", "is_approved"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    rating = db.Column(db.Integer, nullable=False, index=True)
    title = db.Column(db.String(100), nullable=False)
    body = db.Column(db.String(1000), nullable=False)

    is_approved = db.Column(db.Boolean, nullable=False, default=True)
    helpful_count = db.Column(db.Integer, nullable=False, default=0)
    is_reported = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", backref="reviews")
    book = db.relationship("Book", backref="reviews")
    votes = db.relationship("ReviewVote", backref="review", cascade="all, delete-orphan")
    reports = db.relationship("ReviewReport", backref="review", cascade="all, delete-orphan")

    @property
    def helpful_percentage(self) -> int:
        if not self.votes:
            return 0
        helpful = len([v for v in self.votes if v.helpful])
        return round(helpful / len(self.votes) * 100)


class ReviewVote(db.Model):
    __tablename__ = "review_votes"
    __table_args__ = (db.UniqueConstraint("review_id", "user_id", name="uq_review_votes_review_user"),)

    id = db.Column(db.Integer, primary_key=True)
    review_id = db.Column(db.Integer, db.ForeignKey("reviews.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    helpful = db.Column(db.Boolean, nullable=False, default=True)


class ReviewReport(db.Model):
    __tablename__ = "review_reports"
    __table_args__ = (db.UniqueConstraint("review_id", "user_id", name="uq_review_reports_review_user"),)

    id = db.Column(db.Integer, primary_key=True)
    review_id = db.Column(db.Integer, db.ForeignKey("reviews.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    reason = db.Column(db.String(20), nullable=False)
    reported_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
