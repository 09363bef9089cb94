from datetime import datetime, timedelta

from flask import current_app

from elibrary.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from elibrary.models.borrow import Borrow
from elibrary.repositories.book_repo import BookRepo
from elibrary.repositories.borrow_repo import BorrowRepo
from elibrary.services.fines import compute_fine, combine_fines, overdue_days
from elibrary.services.notification_service import NotificationService

RETURN_CONDITIONS = ("good", "fair", "damaged", "lost")


class BorrowService:
    """
    Ödünç alma / iade / yenileme geçişleri.

    Kontroller okuma-sonra-yazma şeklinde yapılır; aynı kitap veya kayıt için
    eşzamanlı iki istek arasında kilit yoktur. Stok için son savunma
    books tablosundaki CHECK kısıtıdır.
    """

    @staticmethod
    def _cfg(key, default):
        return current_app.config.get(key, default)

    @staticmethod
    def _get_for_actor(borrow_id: int, actor) -> Borrow:
        borrow = BorrowRepo.get(borrow_id)
        if not borrow:
            raise NotFoundError("Borrow record not found")
        # admin değilse kendi kaydı olmalı
        if not actor.is_admin and borrow.user_id != actor.id:
            raise ForbiddenError("Access denied")
        return borrow

    @staticmethod
    def borrow_book(actor, book_id: int, due_date: datetime, now: datetime | None = None) -> Borrow:
        now = now or datetime.utcnow()

        if not actor.is_active:
            raise ForbiddenError("Account is deactivated")

        if due_date <= now:
            raise ValidationError("Due date must be after borrow date")

        book = BookRepo.get(book_id)
        if not book or not book.is_active:
            raise NotFoundError("Book not found")

        if book.available_copies <= 0:
            raise ConflictError("Book is not available for borrowing")

        if BorrowRepo.find_active_for(actor.id, book.id):
            raise ConflictError("You already have this book borrowed")

        limit = BorrowService._cfg("MAX_ACTIVE_BORROWS", 5)
        if BorrowRepo.count_active_for_user(actor.id) >= limit:
            raise ConflictError(f"You have reached the maximum borrowing limit ({limit} books)")

        borrow = Borrow(
            user_id=actor.id,
            book_id=book.id,
            borrow_date=now,
            due_date=due_date,
            status="borrowed",
            issued_by_id=actor.id,
        )
        BorrowRepo.create(borrow)

        # stok düş
        book.available_copies -= 1
        actor.borrowed_books.append(borrow)

        # tek commit noktası
        BorrowRepo.commit()
        current_app.logger.info(f"[borrow] user={actor.id} book={book.id} borrow={borrow.id} due={due_date}")
        return borrow

    @staticmethod
    def return_book(actor, borrow_id: int, condition: str | None = None, notes: str | None = None,
                    manual_fine=None, now: datetime | None = None) -> Borrow:
        now = now or datetime.utcnow()
        borrow = BorrowService._get_for_actor(borrow_id, actor)

        if borrow.status == "returned":
            raise ConflictError("Book is already returned")

        if condition is not None and condition not in RETURN_CONDITIONS:
            raise ValidationError(f"condition must be one of: {', '.join(RETURN_CONDITIONS)}")
        if manual_fine is not None and manual_fine < 0:
            raise ValidationError("Fine amount cannot be negative")

        borrow.return_date = now
        borrow.status = "returned"
        borrow.returned_by_id = actor.id
        if condition:
            borrow.return_condition = condition
        if notes:
            borrow.notes = notes[:500]

        if now > borrow.due_date:
            late_fee = compute_fine(borrow.due_date, now, BorrowService._cfg("FINE_PER_DAY", 5))
            borrow.fine_amount = combine_fines(late_fee, manual_fine)
        elif manual_fine is not None:
            borrow.fine_amount = manual_fine

        # stok iade, toplamı aşmadan
        book = borrow.book
        if book:
            book.available_copies = min(book.total_copies, book.available_copies + 1)

        owner = borrow.user
        if owner and borrow in owner.borrowed_books:
            owner.borrowed_books.remove(borrow)

        BorrowRepo.commit()
        current_app.logger.info(
            f"[borrow] returned borrow={borrow.id} by={actor.id} fine={borrow.fine_amount}"
        )

        # iade maili: başarısız olursa sadece loglanır
        NotificationService.dispatch(NotificationService.send_return_confirmation, borrow.id)
        return borrow

    @staticmethod
    def renew_book(actor, borrow_id: int, now: datetime | None = None) -> Borrow:
        now = now or datetime.utcnow()
        borrow = BorrowService._get_for_actor(borrow_id, actor)

        if borrow.status != "borrowed":
            raise ConflictError("Can only renew borrowed books")

        if borrow.renewal_count >= BorrowService._cfg("MAX_RENEWALS", 2):
            raise ConflictError("Maximum renewal limit reached")

        if now > borrow.due_date:
            raise ConflictError("Cannot renew overdue books")

        borrow.due_date = borrow.due_date + timedelta(days=BorrowService._cfg("RENEWAL_DAYS", 14))
        borrow.renewal_count += 1
        borrow.status = "borrowed"

        BorrowRepo.commit()
        current_app.logger.info(
            f"[borrow] renewed borrow={borrow.id} count={borrow.renewal_count} due={borrow.due_date}"
        )
        return borrow

    @staticmethod
    def pay_fine(actor, borrow_id: int, now: datetime | None = None) -> Borrow:
        now = now or datetime.utcnow()
        borrow = BorrowService._get_for_actor(borrow_id, actor)

        if not borrow.fine_amount or borrow.fine_amount <= 0:
            raise ConflictError("No fine to pay for this record")
        if borrow.fine_paid:
            raise ConflictError("Fine is already paid")

        borrow.fine_paid = True
        borrow.fine_paid_date = now
        BorrowRepo.commit()
        return borrow

    @staticmethod
    def my_books(actor):
        return BorrowRepo.list_by_user(actor.id)

    @staticmethod
    def list_all(status: str | None = None, overdue_only: bool = False, now: datetime | None = None):
        now = now or datetime.utcnow()
        return BorrowRepo.query_all(status=status, overdue_at=now if overdue_only else None)

    @staticmethod
    def list_overdue(now: datetime | None = None):
        """Admin paneli için: gecikme günü ve hesaplanan ceza ile."""
        now = now or datetime.utcnow()
        per_day = BorrowService._cfg("FINE_PER_DAY", 5)
        return [
            (b, overdue_days(b.due_date, now), compute_fine(b.due_date, now, per_day))
            for b in BorrowRepo.find_overdue(now)
        ]
