# elibrary/controllers/book_controller.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from elibrary.services.book_service import BookService
from elibrary.utils.auth import role_required
from elibrary.utils.pagination import paginate
from elibrary.utils.serializers import book_json
from elibrary.utils.validators import parse_bool_arg

book_bp = Blueprint("books", __name__)


@book_bp.get("")
def list_books():
    query = BookService.search_books(
        search=(request.args.get("search") or "").strip() or None,
        category=request.args.get("category") or None,
        available_only=bool(parse_bool_arg(request.args.get("available"))),
    )
    return jsonify(paginate(query, book_json))


@book_bp.get("/<int:book_id>")
def get_book(book_id: int):
    b = BookService.get_book(book_id)
    return jsonify({"success": True, "data": book_json(b)})


@book_bp.post("")
@jwt_required()
@role_required("admin")
def create_book():
    data = request.get_json(silent=True) or {}
    b = BookService.create_book(data, added_by_id=int(get_jwt_identity()))
    return jsonify({"success": True, "message": "Book added successfully", "data": book_json(b)}), 201


@book_bp.put("/<int:book_id>")
@jwt_required()
@role_required("admin")
def update_book(book_id: int):
    data = request.get_json(silent=True) or {}
    b = BookService.update_book(book_id, data)
    return jsonify({"success": True, "message": "Book updated successfully", "data": book_json(b)})


@book_bp.delete("/<int:book_id>")
@jwt_required()
@role_required("admin")
def delete_book(book_id: int):
    BookService.delete_book(book_id)
    return jsonify({"success": True, "message": "Book deleted successfully"})
