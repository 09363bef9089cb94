from datetime import datetime, timedelta
from types import SimpleNamespace

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from elibrary.errors import ValidationError
from elibrary.extensions import db
from elibrary.services.mail_service import MailService
from elibrary.services.notification_service import NotificationService
from elibrary.utils.auth import current_user, role_required

notif_bp = Blueprint("notifications", __name__)

SAMPLE_BOOK = {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald"}


@notif_bp.post("/test-email")
@jwt_required()
@role_required("admin")
def test_email():
    data = request.get_json(silent=True) or {}
    admin = current_user()
    user = SimpleNamespace(name=admin.name, email=data.get("email") or admin.email)
    book = SimpleNamespace(**SAMPLE_BOOK)
    email_type = data.get("type", "welcome")

    if email_type == "welcome":
        ok = MailService.send_welcome_email(user)
    elif email_type == "due-reminder":
        ok = MailService.send_due_date_reminder(user, book, datetime.utcnow() + timedelta(days=3))
    elif email_type == "overdue":
        ok = MailService.send_overdue_notification(user, book, 5, 25)
    elif email_type == "returned":
        ok = MailService.send_book_returned_confirmation(user, book, 10)
    else:
        raise ValidationError("Invalid email type")
    db.session.commit()

    return jsonify({
        "success": True,
        "message": f"Test {email_type} email sent successfully",
        "data": {"sent": ok},
    })


@notif_bp.post("/send-immediate")
@jwt_required()
@role_required("admin")
def send_immediate():
    result = NotificationService.send_immediate_notifications()
    return jsonify({"success": True, "message": "Immediate notifications sent", "data": result})


@notif_bp.post("/run-sweeps")
@jwt_required()
@role_required("admin")
def run_sweeps():
    due_soon = NotificationService.run_due_soon_sweep()
    overdue = NotificationService.run_overdue_sweep()
    return jsonify({"success": True, "data": {"due_soon": due_soon, "overdue": overdue}})


@notif_bp.get("/stats")
@jwt_required()
@role_required("admin")
def stats():
    data = NotificationService.stats()
    scheduler = current_app.extensions.get("notification_scheduler")
    data["scheduled_jobs"] = scheduler.jobs() if scheduler else []
    return jsonify({"success": True, "data": data})
