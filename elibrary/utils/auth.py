from functools import wraps
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity
from flask import jsonify

from elibrary.errors import LibraryError
from elibrary.repositories.user_repo import UserRepo


def role_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt()
            role = claims.get("role")
            if role not in roles:
                return jsonify({"success": False, "message": "Admin access required"}), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def current_user():
    """JWT identity'den kullanıcıyı yükler; silinmiş hesaplar 401."""
    user = UserRepo.get_by_id(int(get_jwt_identity()))
    if not user:
        raise LibraryError("User not found", 401)
    return user
