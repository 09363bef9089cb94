# elibrary/tasks/scheduler.py
from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from flask import has_app_context

from elibrary.extensions import db


class NotificationScheduler:
    """
    Günlük bildirim taramalarını ve tek seferlik mail işlerini çalıştırır.
    - Her job kendi app context'inde çalışır (DB erişimleri patlamasın diye).
    - Bir job'daki hata loglanır, diğerlerini etkilemez.
    """

    def __init__(self, app=None):
        self.app = None
        self._scheduler: BackgroundScheduler | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        app.extensions["notification_scheduler"] = self

    @property
    def running(self) -> bool:
        return bool(self._scheduler and self._scheduler.running)

    def start(self) -> bool:
        app = self.app
        if not app.config.get("SCHEDULER_ENABLED", True):
            app.logger.info("[scheduler] SCHEDULER_ENABLED=0, scheduler başlatılmadı.")
            return False

        # Debug reloader çift process çalıştırır; sadece asıl process'te başlat
        if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
            app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
            return False

        if self.running:
            return True

        # Job fonksiyonlarını burada import etmek circular import riskini azaltır
        from elibrary.services.notification_service import NotificationService

        scheduler = BackgroundScheduler(timezone="UTC")
        scheduler.add_job(
            func=self._run,
            args=("due_soon_sweep", NotificationService.run_due_soon_sweep),
            trigger=CronTrigger(hour=app.config.get("DUE_SOON_HOUR", 9), minute=0, timezone="UTC"),
            id="due_soon_sweep",
            replace_existing=True,
            max_instances=1,        # aynı job üst üste binmesin
            coalesce=True,          # kaçırılanları tek seferde toparla
            misfire_grace_time=3600,
        )
        scheduler.add_job(
            func=self._run,
            args=("overdue_sweep", NotificationService.run_overdue_sweep),
            trigger=CronTrigger(hour=app.config.get("OVERDUE_HOUR", 10), minute=0, timezone="UTC"),
            id="overdue_sweep",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )

        scheduler.start()
        self._scheduler = scheduler
        atexit.register(self.stop)
        app.logger.info(
            f"[scheduler] Bildirim job'ları başladı: due_soon {app.config.get('DUE_SOON_HOUR', 9):02d}:00 UTC, "
            f"overdue {app.config.get('OVERDUE_HOUR', 10):02d}:00 UTC"
        )
        return True

    def stop(self):
        if self.running:
            self._scheduler.shutdown(wait=False)
            self.app.logger.info("[scheduler] Scheduler shutdown.")
        self._scheduler = None

    def jobs(self):
        if not self.running:
            return []
        return [
            {"id": job.id, "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None}
            for job in self._scheduler.get_jobs()
        ]

    def enqueue(self, func, *args):
        """Tek seferlik iş: scheduler çalışıyorsa hemen kuyruğa, değilse inline."""
        name = getattr(func, "__name__", "job")
        if not self.running:
            self._run(name, func, *args)
            return
        self._scheduler.add_job(func=self._run, args=(name, func, *args), misfire_grace_time=None)

    def _run(self, name, func, *args):
        # inline çağrıda mevcut context (ve session) kullanılır
        if has_app_context():
            return self._call(name, func, *args)
        with self.app.app_context():
            return self._call(name, func, *args)

    def _call(self, name, func, *args):
        try:
            return func(*args)
        except Exception as ex:
            db.session.rollback()
            self.app.logger.exception(f"[scheduler] {name} error: {ex}")
