# elibrary/services/mail_service.py
from __future__ import annotations

from datetime import datetime
from flask import current_app
from flask_mail import Message

from elibrary.extensions import mail
from elibrary.models.notification_log import NotificationLog
from elibrary.repositories.notification_repo import NotificationRepo


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str, html: str | None = None) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body, html=html)
            mail.send(msg)
            return True, None
        except Exception as e:
            current_app.logger.warning(f"[mail] Mail gönderilemedi ({to_email}): {e}")
            return False, str(e)

    @staticmethod
    def log_notification(
        borrow_id: int | None,
        notif_type: str,
        to_email: str | None,
        message: str,
        success: bool,
        error: str | None = None,
        commit: bool = False,  # loop içinde commit yapma
    ) -> NotificationLog:
        row = NotificationLog(
            borrow_id=borrow_id,
            type=notif_type,
            email=to_email,
            message=message,
            success=bool(success),
            error_message=error,
            sent_at=datetime.utcnow(),
        )
        return NotificationRepo.log(row, commit=commit)

    @staticmethod
    def _deliver(notif_type: str, to_email: str | None, subject: str, body: str,
                 borrow_id: int | None = None, commit: bool = False) -> bool:
        if not to_email:
            MailService.log_notification(
                borrow_id=borrow_id,
                notif_type=notif_type,
                to_email=None,
                message="User email not found",
                success=False,
                error="missing_email",
                commit=commit,
            )
            return False

        ok, err = MailService.send_email(to_email, subject, body)
        MailService.log_notification(
            borrow_id=borrow_id,
            notif_type=notif_type,
            to_email=to_email,
            message=subject,
            success=ok,
            error=err,
            commit=commit,
        )
        return ok

    @staticmethod
    def _labels(user, book):
        to_email = getattr(user, "email", None) if user else None
        name = getattr(user, "name", None) or "Reader"
        title = getattr(book, "title", None) or "Book"
        author = getattr(book, "author", None) or "Unknown"
        return to_email, name, title, author

    @staticmethod
    def _link(path: str) -> str:
        return f"{current_app.config.get('FRONTEND_URL', '').rstrip('/')}{path}"

    @staticmethod
    def send_due_date_reminder(user, book, due_date, borrow_id=None, commit=False) -> bool:
        to_email, name, title, author = MailService._labels(user, book)
        subject = f'Reminder: "{title}" is due soon'
        body = (
            f"Dear {name},\n\n"
            "This is a friendly reminder that your borrowed book is due soon:\n\n"
            f"  {title} by {author}\n"
            f"  Due date: {due_date:%Y-%m-%d}\n\n"
            "Please return the book by the due date to avoid late fees.\n"
            "You can also renew the book online if you need more time (up to 2 renewals).\n\n"
            f"View your books: {MailService._link('/my-books')}\n"
        )
        return MailService._deliver("due_soon", to_email, subject, body, borrow_id, commit)

    @staticmethod
    def send_overdue_notification(user, book, days_overdue: int, fine, borrow_id=None, commit=False) -> bool:
        to_email, name, title, author = MailService._labels(user, book)
        per_day = current_app.config.get("FINE_PER_DAY", 5)
        subject = f'Overdue: "{title}" - Please return immediately'
        body = (
            f"Dear {name},\n\n"
            f"Your borrowed book is now {days_overdue} day(s) overdue:\n\n"
            f"  {title} by {author}\n"
            f"  Days overdue: {days_overdue}\n"
            f"  Current fine: ${fine}\n\n"
            "Please return this book immediately to avoid additional charges.\n"
            f"Late fees are ${per_day} per day until the book is returned.\n\n"
            f"View your books: {MailService._link('/my-books')}\n"
        )
        return MailService._deliver("overdue", to_email, subject, body, borrow_id, commit)

    @staticmethod
    def send_book_returned_confirmation(user, book, fine=0, borrow_id=None, commit=False,
                                        returned_at: datetime | None = None) -> bool:
        to_email, name, title, author = MailService._labels(user, book)
        subject = f'Book Returned: "{title}"'
        if fine and fine > 0:
            fine_text = f"  Fine due: ${fine}\n\nPlease pay the outstanding fine at your next visit.\n"
        else:
            fine_text = "\nNo fines due. Thank you for returning on time!\n"
        body = (
            f"Dear {name},\n\n"
            "Thank you for returning your book:\n\n"
            f"  {title} by {author}\n"
            f"  Returned: {returned_at or datetime.utcnow():%Y-%m-%d}\n"
            f"{fine_text}\n"
            f"Browse more books: {MailService._link('/books')}\n"
        )
        return MailService._deliver("returned", to_email, subject, body, borrow_id, commit)

    @staticmethod
    def send_welcome_email(user, commit=False) -> bool:
        to_email, name, _title, _author = MailService._labels(user, None)
        max_borrows = current_app.config.get("MAX_ACTIVE_BORROWS", 5)
        subject = "Welcome to E-Library Management System!"
        body = (
            f"Dear {name},\n\n"
            "Welcome to our E-Library Management System! Your account has been successfully created.\n\n"
            "Getting started:\n"
            f"  - Borrow up to {max_borrows} books at a time\n"
            "  - Enjoy 14-day borrowing periods with renewal options\n"
            "  - Get email reminders before due dates\n"
            "  - Rate and review books you've read\n\n"
            f"Start browsing: {MailService._link('/books')}\n"
        )
        return MailService._deliver("welcome", to_email, subject, body, None, commit)
