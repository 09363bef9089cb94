from datetime import datetime
from elibrary.models.notification_log import NotificationLog
from elibrary.extensions import db


class NotificationRepo:
    @staticmethod
    def log(entry: NotificationLog, commit: bool = False):
        db.session.add(entry)
        if commit:
            db.session.commit()
        return entry

    @staticmethod
    def count_since(since: datetime, success: bool) -> int:
        return NotificationLog.query.filter(
            NotificationLog.sent_at >= since,
            NotificationLog.success.is_(success),
        ).count()

    @staticmethod
    def last_sent_at():
        row = NotificationLog.query.order_by(NotificationLog.sent_at.desc()).first()
        return row.sent_at if row else None
