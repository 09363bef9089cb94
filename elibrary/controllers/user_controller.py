from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from elibrary.repositories.borrow_repo import BorrowRepo
from elibrary.repositories.user_repo import UserRepo
from elibrary.services.user_service import UserService
from elibrary.utils.auth import current_user, role_required
from elibrary.utils.pagination import paginate
from elibrary.utils.serializers import borrow_json, user_json
from elibrary.utils.validators import parse_bool_arg

user_bp = Blueprint("users", __name__)


@user_bp.get("")
@jwt_required()
@role_required("admin")
def list_users():
    query = UserRepo.search(
        search=(request.args.get("search") or "").strip() or None,
        role=request.args.get("role") or None,
        active=parse_bool_arg(request.args.get("active")),
    )
    return jsonify(paginate(query, user_json))


@user_bp.get("/stats/dashboard")
@jwt_required()
@role_required("admin")
def dashboard_stats():
    return jsonify({"success": True, "data": UserService.dashboard_stats()})


@user_bp.put("/profile")
@jwt_required()
def update_profile():
    data = request.get_json(silent=True) or {}
    user = UserService.update_profile(current_user(), data)
    return jsonify({"success": True, "message": "Profile updated successfully", "data": user_json(user)})


@user_bp.get("/<int:user_id>")
@jwt_required()
@role_required("admin")
def get_user(user_id: int):
    user = UserService.get_user(user_id)
    data = user_json(user)
    data["borrow_history"] = [borrow_json(b) for b in BorrowRepo.recent_by_user(user.id, limit=10)]
    return jsonify({"success": True, "data": data})


@user_bp.put("/<int:user_id>")
@jwt_required()
@role_required("admin")
def update_user(user_id: int):
    data = request.get_json(silent=True) or {}
    user = UserService.admin_update(user_id, data)
    return jsonify({"success": True, "message": "User updated successfully", "data": user_json(user)})


@user_bp.put("/<int:user_id>/toggle-status")
@jwt_required()
@role_required("admin")
def toggle_status(user_id: int):
    user = UserService.toggle_status(user_id)
    state = "activated" if user.is_active else "deactivated"
    return jsonify({"success": True, "message": f"User {state} successfully", "data": user_json(user)})
