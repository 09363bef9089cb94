# elibrary/services/fines.py
"""Gecikme cezası hesapları.

Gecikme günü tam gün değil, başlayan her 24 saat bir gün sayılır:
teslim tarihinden 1 saat sonra iade edilen kitap 1 gün gecikmiş olur.
"""
import math
from datetime import datetime

FINE_PER_DAY = 5
SECONDS_PER_DAY = 24 * 60 * 60


def overdue_days(due_date: datetime | None, at: datetime) -> int:
    if not due_date:
        return 0
    seconds = (at - due_date).total_seconds()
    return max(0, math.ceil(seconds / SECONDS_PER_DAY))


def compute_fine(due_date: datetime | None, at: datetime, fine_per_day: int = FINE_PER_DAY) -> int:
    return overdue_days(due_date, at) * fine_per_day


def combine_fines(computed, manual=None):
    """Elle girilen ceza (hasar vs.) gecikme cezasıyla toplanmaz, büyük olan geçerli."""
    if manual is None:
        return computed
    return max(computed, manual)


def should_send_overdue_notice(days: int) -> bool:
    # 1. gün, 1. hafta, sonra 14 günde bir
    return days == 1 or days == 7 or (days > 0 and days % 14 == 0)
