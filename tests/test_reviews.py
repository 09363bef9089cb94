import pytest

from elibrary.errors import ConflictError, ForbiddenError, ValidationError
from elibrary.models.review import Review
from elibrary.services.review_service import ReviewService, aggregate_ratings
from tests.factories import auth_headers, make_user


def _payload(book, rating=5, **kw):
    data = {"bookId": book.id, "rating": rating, "title": "Great read", "review": "Loved every page of it."}
    data.update(kw)
    return data


def test_aggregate_ratings():
    stats = aggregate_ratings([5, 4, 3])
    assert stats["average_rating"] == 4.0
    assert stats["total_reviews"] == 3
    assert stats["rating_distribution"] == {1: 0, 2: 0, 3: 1, 4: 1, 5: 1}


def test_aggregate_rounds_to_one_decimal():
    assert aggregate_ratings([5, 4, 4])["average_rating"] == 4.3


def test_aggregate_empty():
    assert aggregate_ratings([]) == {
        "average_rating": 0,
        "total_reviews": 0,
        "rating_distribution": {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
    }


def test_rating_stats_only_count_approved(book):
    users = [make_user(f"rev{i}") for i in range(4)]
    for user, rating in zip(users, [5, 4, 3, 1]):
        ReviewService.create_review(user, _payload(book, rating))

    hidden = Review.query.filter_by(rating=1).one()
    hidden.is_approved = False

    stats = ReviewService.rating_stats(book.id)
    assert stats["average_rating"] == 4.0
    assert stats["rating_distribution"] == {1: 0, 2: 0, 3: 1, 4: 1, 5: 1}


def test_one_review_per_user_per_book(reader, book):
    ReviewService.create_review(reader, _payload(book))
    with pytest.raises(ConflictError, match="already reviewed"):
        ReviewService.create_review(reader, _payload(book, 3))


@pytest.mark.parametrize("rating", [0, 6, 4.5, "five"])
def test_rating_must_be_whole_number_in_range(reader, book, rating):
    with pytest.raises(ValidationError):
        ReviewService.create_review(reader, _payload(book, rating))


def test_short_review_rejected(reader, book):
    with pytest.raises(ValidationError, match="at least 10"):
        ReviewService.create_review(reader, _payload(book, review="meh"))


def test_helpful_votes(reader, other_reader, admin, book):
    review = ReviewService.create_review(reader, _payload(book))

    ReviewService.vote_helpful(other_reader, review.id, True)
    ReviewService.vote_helpful(admin, review.id, False)
    assert review.helpful_count == 1
    assert review.helpful_percentage == 50

    # tekrar oy eskisinin yerine geçer
    ReviewService.vote_helpful(admin, review.id, True)
    assert review.helpful_count == 2
    assert len(review.votes) == 2

    with pytest.raises(ConflictError):
        ReviewService.vote_helpful(reader, review.id, True)


def test_report_once(reader, other_reader, book):
    review = ReviewService.create_review(reader, _payload(book))
    ReviewService.report(other_reader, review.id, "spam")
    assert review.is_reported is True
    with pytest.raises(ConflictError):
        ReviewService.report(other_reader, review.id, "spam")
    with pytest.raises(ValidationError):
        ReviewService.report(reader, review.id, "boring")


def test_only_owner_edits(reader, other_reader, book):
    review = ReviewService.create_review(reader, _payload(book))
    with pytest.raises(ForbiddenError):
        ReviewService.update_review(other_reader, review.id, {"rating": 1})
    assert ReviewService.update_review(reader, review.id, {"rating": 2}).rating == 2


def test_review_api_flow(client, reader, other_reader, book):
    res = client.post("/api/reviews", json=_payload(book, 5), headers=auth_headers(reader))
    assert res.status_code == 201
    review_id = res.get_json()["data"]["id"]

    res = client.post("/api/reviews", json=_payload(book, 4), headers=auth_headers(reader))
    assert res.status_code == 400
    assert res.get_json()["success"] is False

    client.post("/api/reviews", json=_payload(book, 3), headers=auth_headers(other_reader))

    res = client.get(f"/api/reviews/book/{book.id}")
    body = res.get_json()
    assert res.status_code == 200
    assert body["pagination"]["total"] == 2
    assert body["rating_stats"]["average_rating"] == 4.0
    assert body["rating_stats"]["rating_distribution"] == {"1": 0, "2": 0, "3": 1, "4": 0, "5": 1}

    res = client.delete(f"/api/reviews/{review_id}", headers=auth_headers(other_reader))
    assert res.status_code == 403
    res = client.delete(f"/api/reviews/{review_id}", headers=auth_headers(reader))
    assert res.status_code == 200


def test_helpful_flag_must_be_boolean(client, reader, other_reader, book):
    review = ReviewService.create_review(reader, _payload(book))
    headers = auth_headers(other_reader)

    res = client.post(f"/api/reviews/{review.id}/helpful", json={"helpful": "false"}, headers=headers)
    assert res.status_code == 400
    assert review.votes == []

    res = client.post(f"/api/reviews/{review.id}/helpful", json={"helpful": False}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["helpful_count"] == 0

    res = client.post(f"/api/reviews/{review.id}/helpful", headers=headers)
    assert res.get_json()["data"]["helpful_count"] == 1
