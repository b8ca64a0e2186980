"""Pay period helpers."""

from __future__ import annotations

from datetime import date, timedelta


def current_pay_period(today: date | None = None) -> tuple[date, date]:
    """Return the Sunday-to-Saturday week containing ``today``."""
    today = today or date.today()
    # date.weekday(): Monday=0 ... Sunday=6
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)
