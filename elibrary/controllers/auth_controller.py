from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from elibrary.services.auth_service import AuthService
from elibrary.utils.auth import current_user
from elibrary.utils.serializers import user_json
from elibrary.utils.validators import validate_profile_payload

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}

    username = (data.get("username") or "").strip()
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = (data.get("password") or "").strip()

    if not username or not email or not password or not name:
        return jsonify({"success": False, "message": "username/name/email/password are required"}), 400
    if len(password) < 6:
        return jsonify({"success": False, "message": "Password must be at least 6 characters"}), 400

    profile = validate_profile_payload(data)
    user = AuthService.register(
        username=username,
        name=profile.pop("name", name),
        email=email,
        password=password,
        role="user",  # dışarıdan role alma
        student_id=(data.get("student_id") or None),
        **profile,
    )
    token = AuthService.issue_token(user)
    return jsonify({"success": True, "access_token": token, "data": user_json(user)}), 201


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    token, user = AuthService.login(
        (data.get("username") or data.get("email") or "").strip(),
        (data.get("password") or "").strip()
    )
    return jsonify({
        "success": True,
        "access_token": token,
        "data": user_json(user)
    })


@auth_bp.get("/me")
@jwt_required()
def me():
    return jsonify({"success": True, "data": user_json(current_user())})
