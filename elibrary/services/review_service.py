from sqlalchemy.exc import IntegrityError

from elibrary.errors import ConflictError, ForbiddenError, NotFoundError
from elibrary.extensions import db
from elibrary.models.review import Review, ReviewVote, ReviewReport
from elibrary.repositories.book_repo import BookRepo
from elibrary.repositories.review_repo import ReviewRepo
from elibrary.utils.validators import parse_int, validate_review_payload, validate_report_reason


def aggregate_ratings(ratings) -> dict:
    """
    Ortalama (1 ondalık) ve 1..5 dağılımı.
    ratings: puan listesi ya da (puan, adet) çiftleri
    """
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    total = 0
    for item in ratings:
        rating, count = item if isinstance(item, tuple) else (item, 1)
        distribution[int(rating)] += count
        total += count

    if not total:
        return {"average_rating": 0, "total_reviews": 0, "rating_distribution": distribution}

    mean = sum(r * c for r, c in distribution.items()) / total
    return {
        "average_rating": round(mean, 1),
        "total_reviews": total,
        "rating_distribution": distribution,
    }


class ReviewService:
    @staticmethod
    def _get(review_id: int) -> Review:
        review = ReviewRepo.get(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    @staticmethod
    def rating_stats(book_id: int) -> dict:
        return aggregate_ratings([tuple(row) for row in ReviewRepo.rating_counts(book_id)])

    @staticmethod
    def list_for_book(book_id: int, sort_by: str = "createdAt", sort_order: str = "desc"):
        return ReviewRepo.query_for_book(book_id, sort_by, sort_order)

    @staticmethod
    def create_review(actor, data: dict) -> Review:
        book_id = parse_int(data.get("bookId", data.get("book_id")), "bookId")
        book = BookRepo.get(book_id)
        if not book or not book.is_active:
            raise NotFoundError("Book not found")

        clean = validate_review_payload(data)

        # kullanıcı başına kitap başına tek yorum
        if ReviewRepo.find_for(actor.id, book.id):
            raise ConflictError("You have already reviewed this book")

        review = Review(user_id=actor.id, book_id=book.id, **clean)
        try:
            return ReviewRepo.add(review)
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("You have already reviewed this book")

    @staticmethod
    def update_review(actor, review_id: int, data: dict) -> Review:
        review = ReviewService._get(review_id)
        if review.user_id != actor.id:
            raise ForbiddenError("You can only edit your own reviews")

        clean = validate_review_payload(data, partial=True)
        for k, v in clean.items():
            setattr(review, k, v)
        ReviewRepo.commit()
        return review

    @staticmethod
    def delete_review(actor, review_id: int):
        review = ReviewService._get(review_id)
        if review.user_id != actor.id and not actor.is_admin:
            raise ForbiddenError("Access denied")
        ReviewRepo.delete(review)

    @staticmethod
    def vote_helpful(actor, review_id: int, helpful: bool = True) -> Review:
        review = ReviewService._get(review_id)
        if review.user_id == actor.id:
            raise ConflictError("You cannot vote on your own review")

        vote = ReviewRepo.find_vote(review.id, actor.id)
        if vote:
            # tekrar oy: eskisinin yerine geçer
            vote.helpful = bool(helpful)
        else:
            review.votes.append(ReviewVote(user_id=actor.id, helpful=bool(helpful)))

        review.helpful_count = len([v for v in review.votes if v.helpful])
        ReviewRepo.commit()
        return review

    @staticmethod
    def report(actor, review_id: int, reason: str) -> Review:
        review = ReviewService._get(review_id)
        reason = validate_report_reason(reason)
        if review.user_id == actor.id:
            raise ConflictError("You cannot report your own review")
        if ReviewRepo.find_report(review.id, actor.id):
            raise ConflictError("You have already reported this review")

        review.reports.append(ReviewReport(user_id=actor.id, reason=reason))
        review.is_reported = True
        ReviewRepo.commit()
        return review
