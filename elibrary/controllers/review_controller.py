from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from elibrary.services.book_service import BookService
from elibrary.services.review_service import ReviewService
from elibrary.utils.auth import current_user
from elibrary.utils.pagination import paginate
from elibrary.utils.serializers import review_json
from elibrary.utils.validators import parse_bool

review_bp = Blueprint("reviews", __name__)


@review_bp.get("/book/<int:book_id>")
def book_reviews(book_id: int):
    BookService.get_book(book_id)
    query = ReviewService.list_for_book(
        book_id,
        sort_by=request.args.get("sortBy", "createdAt"),
        sort_order=request.args.get("sortOrder", "desc"),
    )
    return jsonify(paginate(query, review_json, default_limit=5, rating_stats=ReviewService.rating_stats(book_id)))


@review_bp.get("/book/<int:book_id>/stats")
def book_rating_stats(book_id: int):
    BookService.get_book(book_id)
    return jsonify({"success": True, "data": ReviewService.rating_stats(book_id)})


@review_bp.post("")
@jwt_required()
def create_review():
    data = request.get_json(silent=True) or {}
    review = ReviewService.create_review(current_user(), data)
    return jsonify({"success": True, "message": "Review created successfully", "data": review_json(review)}), 201


@review_bp.put("/<int:review_id>")
@jwt_required()
def update_review(review_id: int):
    data = request.get_json(silent=True) or {}
    review = ReviewService.update_review(current_user(), review_id, data)
    return jsonify({"success": True, "message": "Review updated successfully", "data": review_json(review)})


@review_bp.delete("/<int:review_id>")
@jwt_required()
def delete_review(review_id: int):
    ReviewService.delete_review(current_user(), review_id)
    return jsonify({"success": True, "message": "Review deleted successfully"})


@review_bp.post("/<int:review_id>/helpful")
@jwt_required()
def vote_helpful(review_id: int):
    data = request.get_json(silent=True) or {}
    helpful = parse_bool(data.get("helpful", True), "helpful")
    review = ReviewService.vote_helpful(current_user(), review_id, helpful)
    return jsonify({"success": True, "data": review_json(review)})


@review_bp.post("/<int:review_id>/report")
@jwt_required()
def report_review(review_id: int):
    data = request.get_json(silent=True) or {}
    ReviewService.report(current_user(), review_id, data.get("reason"))
    return jsonify({"success": True, "message": "Review reported"})
