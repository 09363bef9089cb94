from datetime import timedelta

import pytest

from elibrary.models.notification_log import NotificationLog
from elibrary.services.mail_service import MailService
from elibrary.services.notification_service import NotificationService
from elibrary.tasks.scheduler import NotificationScheduler
from tests.factories import make_book, make_borrow, make_user


@pytest.mark.parametrize("days", [1, 7, 14, 28])
def test_overdue_sweep_notifies_on_throttle_days(reader, book, now, outbox, days):
    b = make_borrow(reader, book, now)

    summary = NotificationService.run_overdue_sweep(now + timedelta(days=days))

    assert summary["matched"] == 1
    assert summary["notified"] == 1
    assert len(outbox) == 1
    assert outbox[0].recipients == [reader.email]
    assert f"{days} day(s) overdue" in outbox[0].body
    assert b.status == "overdue"
    assert float(b.fine_amount) == days * 5


@pytest.mark.parametrize("days", [2, 3, 15])
def test_overdue_sweep_stays_quiet_between_throttle_days(reader, book, now, outbox, days):
    b = make_borrow(reader, book, now)

    summary = NotificationService.run_overdue_sweep(now + timedelta(days=days))

    assert summary["updated"] == 1
    assert summary["notified"] == 0
    assert outbox == []
    # ceza ve durum yine de güncellenir
    assert b.status == "overdue"
    assert float(b.fine_amount) == days * 5


def test_overdue_sweep_ignores_returned_and_future(reader, other_reader, now):
    book = make_book(total=5)
    make_borrow(reader, book, now - timedelta(days=3), status="returned")
    make_borrow(other_reader, book, now + timedelta(days=3))

    summary = NotificationService.run_overdue_sweep(now)
    assert summary["matched"] == 0


def test_overdue_sweep_keeps_paid_fine(reader, book, now):
    b = make_borrow(reader, book, now - timedelta(days=1), fine_amount=5, fine_paid=True)

    NotificationService.run_overdue_sweep(now + timedelta(days=5))

    assert float(b.fine_amount) == 5
    assert b.status == "overdue"


def test_overdue_sweep_logs_notifications(reader, book, now):
    b = make_borrow(reader, book, now)
    NotificationService.run_overdue_sweep(now + timedelta(days=1))

    logs = NotificationLog.query.filter_by(borrow_id=b.id).all()
    assert [(log.type, log.success) for log in logs] == [("overdue", True)]


def test_due_soon_window(reader, now, outbox):
    book = make_book(total=10)
    users = [make_user(f"user{i}") for i in range(5)]
    start, end = NotificationService.due_soon_window(now)

    make_borrow(users[0], book, now + timedelta(days=1))        # çok erken
    inside_a = make_borrow(users[1], book, start)                # pencere başı
    inside_b = make_borrow(users[2], book, now + timedelta(days=3))
    make_borrow(users[3], book, end + timedelta(seconds=1))       # pencere dışı
    make_borrow(users[4], book, start + timedelta(hours=5), status="overdue")

    summary = NotificationService.run_due_soon_sweep(now)

    assert summary == {"matched": 2, "notified": 2, "failed": 0}
    assert sorted(m.recipients[0] for m in outbox) == sorted([inside_a.user.email, inside_b.user.email])
    assert "is due soon" in outbox[0].subject


def test_due_soon_sweep_resends_daily_while_in_window(reader, book, now, outbox):
    make_borrow(reader, book, now + timedelta(days=3))

    NotificationService.run_due_soon_sweep(now)
    NotificationService.run_due_soon_sweep(now + timedelta(days=1))

    assert len(outbox) == 2


def test_sweep_failure_is_isolated_per_record(monkeypatch, now, outbox):
    book = make_book(total=5)
    first = make_borrow(make_user("first"), book, now + timedelta(days=3))
    second = make_borrow(make_user("second"), book, now + timedelta(days=3))

    real_send = MailService.send_due_date_reminder

    def flaky(user, bk, due, borrow_id=None, commit=False):
        if borrow_id == first.id:
            raise RuntimeError("smtp down")
        return real_send(user, bk, due, borrow_id=borrow_id, commit=commit)

    monkeypatch.setattr(MailService, "send_due_date_reminder", staticmethod(flaky))

    summary = NotificationService.run_due_soon_sweep(now)

    assert summary == {"matched": 2, "notified": 1, "failed": 1}
    assert [m.recipients[0] for m in outbox] == [second.user.email]


def test_missing_email_counts_as_failed(reader, book, now):
    b = make_borrow(reader, book, now)
    reader.email = ""

    summary = NotificationService.run_overdue_sweep(now + timedelta(days=1))

    assert summary["failed"] == 1
    log = NotificationLog.query.filter_by(borrow_id=b.id).one()
    assert log.success is False
    assert log.error_message == "missing_email"


def test_send_immediate_picks_due_and_overdue(reader, other_reader, now, outbox):
    book = make_book(total=5)
    make_borrow(reader, book, now + timedelta(days=5))
    make_borrow(other_reader, book, now - timedelta(days=2))

    result = NotificationService.send_immediate_notifications(now)

    assert result == {"count": 2, "sent": 2}
    subjects = sorted(m.subject for m in outbox)
    assert subjects[0].startswith("Overdue")
    assert subjects[1].startswith("Reminder")


def test_stats_counts(reader, other_reader, now):
    book = make_book(total=5)
    make_borrow(reader, book, now + timedelta(hours=2))
    make_borrow(other_reader, book, now - timedelta(days=1))

    stats = NotificationService.stats(now)

    assert stats["due_today"] == 1
    assert stats["due_soon"] == 1
    assert stats["overdue"] == 1
    assert stats["last_check"] == now.isoformat()


def test_scheduler_disabled_in_tests_runs_jobs_inline(app):
    scheduler = app.extensions["notification_scheduler"]
    assert scheduler.running is False
    assert scheduler.start() is False

    calls = []
    scheduler.enqueue(lambda x: calls.append(x), 42)
    assert calls == [42]


def test_scheduler_job_failure_is_logged_not_raised(app, caplog):
    scheduler = app.extensions["notification_scheduler"]

    def boom():
        raise RuntimeError("mail server exploded")

    scheduler.enqueue(boom)
    assert "mail server exploded" in caplog.text


def test_scheduler_registers_daily_jobs(app):
    app.config["SCHEDULER_ENABLED"] = True
    scheduler = NotificationScheduler(app)
    try:
        assert scheduler.start() is True
        ids = sorted(job["id"] for job in scheduler.jobs())
        assert ids == ["due_soon_sweep", "overdue_sweep"]
    finally:
        scheduler.stop()
    assert scheduler.running is False
