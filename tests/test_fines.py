from datetime import datetime, timedelta

import pytest

from elibrary.services.fines import (
    combine_fines,
    compute_fine,
    overdue_days,
    should_send_overdue_notice,
)

DUE = datetime(2024, 3, 1, 12, 0, 0)


def test_no_fine_before_or_at_due_date():
    assert overdue_days(DUE, DUE - timedelta(days=2)) == 0
    assert overdue_days(DUE, DUE) == 0
    assert compute_fine(DUE, DUE) == 0


def test_seven_days_late_is_35():
    assert overdue_days(DUE, DUE + timedelta(days=7)) == 7
    assert compute_fine(DUE, DUE + timedelta(days=7)) == 35


def test_partial_day_rounds_up():
    assert overdue_days(DUE, DUE + timedelta(hours=1)) == 1
    assert overdue_days(DUE, DUE + timedelta(days=2, minutes=1)) == 3


def test_custom_rate():
    assert compute_fine(DUE, DUE + timedelta(days=3), fine_per_day=2) == 6


def test_missing_due_date():
    assert overdue_days(None, DUE) == 0


def test_manual_fine_takes_max_not_sum():
    assert combine_fines(35, 20) == 35
    assert combine_fines(35, 50) == 50
    assert combine_fines(35, None) == 35


@pytest.mark.parametrize("days", [1, 7, 14, 28, 42])
def test_notice_days(days):
    assert should_send_overdue_notice(days)


@pytest.mark.parametrize("days", [0, 2, 3, 6, 8, 15, 27])
def test_quiet_days(days):
    assert not should_send_overdue_notice(days)
