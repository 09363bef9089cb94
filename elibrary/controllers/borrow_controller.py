from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from elibrary.services.borrow_service import BorrowService
from elibrary.utils.auth import current_user, role_required
from elibrary.utils.pagination import paginate
from elibrary.utils.serializers import borrow_json
from elibrary.utils.validators import parse_amount, parse_bool_arg, parse_datetime, parse_int

borrow_bp = Blueprint("borrow", __name__)


@borrow_bp.post("")
@jwt_required()
def borrow_book():
    data = request.get_json(silent=True) or {}
    book_id = parse_int(data.get("book_id", data.get("bookId")), "book_id")
    due_date = parse_datetime(data.get("due_date", data.get("dueDate")), "due date")

    b = BorrowService.borrow_book(current_user(), book_id, due_date)
    return jsonify({"success": True, "message": "Book borrowed successfully", "data": borrow_json(b)}), 201


@borrow_bp.post("/return/<int:borrow_id>")
@borrow_bp.put("/<int:borrow_id>/return")
@jwt_required()
def return_book(borrow_id):
    data = request.get_json(silent=True) or {}

    manual_fine = data.get("fine_amount", data.get("fineAmount"))
    if manual_fine in (None, ""):
        manual_fine = None
    else:
        manual_fine = parse_amount(manual_fine, "fine_amount")

    b = BorrowService.return_book(
        current_user(),
        borrow_id,
        condition=data.get("return_condition", data.get("returnCondition")) or None,
        notes=data.get("return_notes", data.get("returnNotes")) or None,
        manual_fine=manual_fine,
    )
    return jsonify({"success": True, "message": "Book returned successfully", "data": borrow_json(b)})


@borrow_bp.post("/renew/<int:borrow_id>")
@borrow_bp.put("/<int:borrow_id>/renew")
@jwt_required()
def renew_book(borrow_id):
    b = BorrowService.renew_book(current_user(), borrow_id)
    return jsonify({"success": True, "message": "Book renewed successfully", "data": borrow_json(b)})


@borrow_bp.post("/<int:borrow_id>/pay-fine")
@jwt_required()
def pay_fine(borrow_id):
    b = BorrowService.pay_fine(current_user(), borrow_id)
    return jsonify({"success": True, "message": "Fine paid", "data": borrow_json(b)})


@borrow_bp.get("/my-books")
@jwt_required()
def my_books():
    borrows = BorrowService.my_books(current_user())
    return jsonify({"success": True, "data": [borrow_json(x) for x in borrows]})


@borrow_bp.get("/all")
@jwt_required()
@role_required("admin")
def all_borrows():
    query = BorrowService.list_all(
        status=request.args.get("status") or None,
        overdue_only=bool(parse_bool_arg(request.args.get("overdue"))),
    )
    return jsonify(paginate(query, borrow_json))


@borrow_bp.get("/overdue")
@jwt_required()
@role_required("admin")
def overdue_borrows():
    rows = BorrowService.list_overdue()
    return jsonify({"success": True, "data": [
        borrow_json(b, overdue_days=days, calculated_fine=fine) for b, days, fine in rows
    ]})
