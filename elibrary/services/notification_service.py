# elibrary/services/notification_service.py
from __future__ import annotations

from datetime import datetime, timedelta
from flask import current_app

from elibrary.extensions import db
from elibrary.repositories.borrow_repo import BorrowRepo
from elibrary.repositories.notification_repo import NotificationRepo
from elibrary.services.fines import overdue_days, compute_fine, should_send_overdue_notice
from elibrary.services.mail_service import MailService


def _start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=23, minute=59, second=59, microsecond=999999)


class NotificationService:
    @staticmethod
    def due_soon_window(now: datetime) -> tuple[datetime, datetime]:
        """2 gün sonrasının başı ile 3 gün sonrasının sonu arası."""
        return _start_of_day(now + timedelta(days=2)), _end_of_day(now + timedelta(days=3))

    @staticmethod
    def run_due_soon_sweep(now: datetime | None = None) -> dict:
        """
        Teslim tarihi 2-3 gün içinde olan ödünçlere hatırlatma yollar.
        Tekrar gönderim kontrolü yok: kayıt pencerede kaldıkça her gün hatırlatılır.
        """
        now = now or datetime.utcnow()
        start, end = NotificationService.due_soon_window(now)
        rows = BorrowRepo.find_due_between(start, end)

        summary = {"matched": len(rows), "notified": 0, "failed": 0}
        for b in rows:
            borrow_id = b.id
            try:
                ok = MailService.send_due_date_reminder(b.user, b.book, b.due_date, borrow_id=b.id)
                db.session.commit()
                if ok:
                    summary["notified"] += 1
                else:
                    summary["failed"] += 1
            except Exception as e:
                db.session.rollback()
                summary["failed"] += 1
                current_app.logger.exception(f"[due_soon] borrow_id={borrow_id} işlenemedi: {e}")

        current_app.logger.info(
            f"[due_soon] matched={summary['matched']} notified={summary['notified']} failed={summary['failed']}"
        )
        return summary

    @staticmethod
    def run_overdue_sweep(now: datetime | None = None) -> dict:
        """
        Teslim tarihi geçmiş ödünçler:
        - ceza yeniden hesaplanır (ödenmişse dokunulmaz)
        - status overdue yapılır
        - bildirim sadece 1., 7. ve 14'ün katı günlerde gider
        """
        now = now or datetime.utcnow()
        per_day = current_app.config.get("FINE_PER_DAY", 5)
        rows = BorrowRepo.find_overdue(now)

        summary = {"matched": len(rows), "updated": 0, "notified": 0, "failed": 0}
        for b in rows:
            borrow_id = b.id
            try:
                days = overdue_days(b.due_date, now)
                fine = compute_fine(b.due_date, now, per_day)

                if not b.fine_paid:
                    b.fine_amount = fine
                b.status = "overdue"
                db.session.commit()
                summary["updated"] += 1

                if should_send_overdue_notice(days):
                    ok = MailService.send_overdue_notification(b.user, b.book, days, fine, borrow_id=b.id)
                    db.session.commit()
                    if ok:
                        summary["notified"] += 1
                    else:
                        summary["failed"] += 1
            except Exception as e:
                db.session.rollback()
                summary["failed"] += 1
                current_app.logger.exception(f"[overdue] borrow_id={borrow_id} işlenemedi: {e}")

        current_app.logger.info(
            f"[overdue] matched={summary['matched']} updated={summary['updated']} "
            f"notified={summary['notified']} failed={summary['failed']}"
        )
        return summary

    @staticmethod
    def send_immediate_notifications(now: datetime | None = None, limit: int = 5) -> dict:
        """Test amaçlı: 7 gün içinde teslimi olan (veya geçmiş) ilk birkaç kayda hemen mail at."""
        now = now or datetime.utcnow()
        per_day = current_app.config.get("FINE_PER_DAY", 5)
        rows = BorrowRepo.find_due_before(now + timedelta(days=7), limit=limit)

        sent = 0
        for b in rows:
            borrow_id = b.id
            try:
                if b.due_date >= now:
                    ok = MailService.send_due_date_reminder(b.user, b.book, b.due_date, borrow_id=b.id)
                else:
                    days = overdue_days(b.due_date, now)
                    ok = MailService.send_overdue_notification(b.user, b.book, days, days * per_day, borrow_id=b.id)
                db.session.commit()
                if ok:
                    sent += 1
            except Exception as e:
                db.session.rollback()
                current_app.logger.exception(f"[notifications] borrow_id={borrow_id} işlenemedi: {e}")

        return {"count": len(rows), "sent": sent}

    @staticmethod
    def stats(now: datetime | None = None) -> dict:
        now = now or datetime.utcnow()
        day_start = _start_of_day(now)
        last_sent = NotificationRepo.last_sent_at()
        return {
            "due_soon": BorrowRepo.count_due_between(now, now + timedelta(days=3)),
            "overdue": len(BorrowRepo.find_overdue(now)),
            "due_today": BorrowRepo.count_due_between(day_start, _end_of_day(now)),
            "sent_today": NotificationRepo.count_since(day_start, success=True),
            "failed_today": NotificationRepo.count_since(day_start, success=False),
            "last_sent_at": last_sent.isoformat() if last_sent else None,
            "last_check": now.isoformat(),
        }

    @staticmethod
    def send_return_confirmation(borrow_id: int) -> bool:
        b = BorrowRepo.get(borrow_id)
        if not b:
            current_app.logger.warning(f"[notifications] borrow_id={borrow_id} bulunamadı, iade maili atlanıyor")
            return False
        return MailService.send_book_returned_confirmation(
            b.user, b.book, fine=b.fine_amount or 0, borrow_id=b.id, commit=True,
            returned_at=b.return_date,
        )

    @staticmethod
    def send_welcome(user_id: int) -> bool:
        from elibrary.repositories.user_repo import UserRepo

        user = UserRepo.get_by_id(user_id)
        if not user:
            return False
        return MailService.send_welcome_email(user, commit=True)

    @staticmethod
    def dispatch(func, *args):
        """
        Mail gibi yan etkileri istek akışından ayırır: scheduler çalışıyorsa
        tek seferlik job olarak kuyruğa atılır, çalışmıyorsa hemen çalıştırılır.
        Her iki durumda da hata loglanır, çağırana yansımaz.
        """
        scheduler = current_app.extensions.get("notification_scheduler")
        if scheduler is not None:
            scheduler.enqueue(func, *args)
            return

        try:
            func(*args)
        except Exception as e:
            db.session.rollback()
            current_app.logger.exception(f"[notifications] {getattr(func, '__name__', func)} başarısız: {e}")
