# elibrary/errors.py
from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from elibrary.extensions import db


class LibraryError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(LibraryError):
    status_code = 400


class NotFoundError(LibraryError):
    status_code = 404


class ConflictError(LibraryError):
    """İş kuralı ihlali: zaten ödünçte, limit dolu, zaten iade edilmiş vs."""
    status_code = 400


class ForbiddenError(LibraryError):
    status_code = 403


def json_error(message, code=400, **extra):
    payload = {"success": False, "message": message}
    payload.update(extra)
    return jsonify(payload), code


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def _library_error(e: LibraryError):
        return json_error(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        if e.code == 404:
            return json_error("Route not found", 404)
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        db.session.rollback()
        current_app.logger.exception(f"[api] Beklenmeyen hata: {e}")
        if current_app.debug or current_app.config.get("ENV") == "development":
            return json_error("Server error", 500, error=str(e))
        return json_error("Server error", 500)
