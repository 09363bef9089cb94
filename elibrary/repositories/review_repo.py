from sqlalchemy import func

from elibrary.models.review import Review, ReviewVote, ReviewReport
from elibrary.extensions import db

SORT_FIELDS = {
    "createdAt": Review.created_at,
    "rating": Review.rating,
    "helpfulCount": Review.helpful_count,
}


class ReviewRepo:
    @staticmethod
    def get(review_id: int):
        return db.session.get(Review, review_id)

    @staticmethod
    def find_for(user_id: int, book_id: int):
        return Review.query.filter_by(user_id=user_id, book_id=book_id).first()

    @staticmethod
    def query_for_book(book_id: int, sort_by: str = "createdAt", sort_order: str = "desc"):
        column = SORT_FIELDS.get(sort_by, Review.created_at)
        order = column.asc() if sort_order == "asc" else column.desc()
        return Review.query.filter_by(book_id=book_id, is_approved=True).order_by(order, Review.id.desc())

    @staticmethod
    def rating_counts(book_id: int):
        """[(rating, count), ...] - sadece onaylı yorumlar"""
        return (
            db.session.query(Review.rating, func.count(Review.id))
            .filter(Review.book_id == book_id, Review.is_approved.is_(True))
            .group_by(Review.rating)
            .all()
        )

    @staticmethod
    def find_vote(review_id: int, user_id: int):
        return ReviewVote.query.filter_by(review_id=review_id, user_id=user_id).first()

    @staticmethod
    def find_report(review_id: int, user_id: int):
        return ReviewReport.query.filter_by(review_id=review_id, user_id=user_id).first()

    @staticmethod
    def add(entry):
        db.session.add(entry)
        db.session.commit()
        return entry

    @staticmethod
    def delete(review: Review):
        db.session.delete(review)
        db.session.commit()

    @staticmethod
    def commit():
        db.session.commit()
