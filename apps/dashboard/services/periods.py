"""
Period date range helpers.
"""
from datetime import datetime, time, timedelta

from dateutil.relativedelta import relativedelta
from django.utils import timezone

DEFAULT_DAYS = 30


def get_date_range(
    period: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None
) -> tuple[datetime | None, datetime | None]:
    """
    Get (start, end) bounds for scan filtering.

    None means unbounded on that side. Anything unknown, including a custom
    period with unparsable dates, falls back to the last 30 days.
    """
    now = timezone.now()

    if period == 'custom' and date_from and date_to:
        custom = _get_custom_dates(date_from, date_to)
        if custom:
            return custom

    handlers = {
        'all': _get_all_dates,
        'week': _get_week_dates,
        'month': _get_month_dates,
        'quarter': _get_quarter_dates,
        'half_year': _get_half_year_dates,
    }

    handler = handlers.get(period)
    if handler:
        return handler(now)

    return now - timedelta(days=DEFAULT_DAYS), None


def _start_of(day) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def _get_all_dates(now):
    """All time (no filtering)."""
    return None, None


def _get_week_dates(now):
    """Since Monday of the current week."""
    today = timezone.localdate(now)
    return _start_of(today - timedelta(days=today.weekday())), None


def _get_month_dates(now):
    """Since the first day of the current month."""
    return _start_of(timezone.localdate(now).replace(day=1)), None


def _get_quarter_dates(now):
    """Last 3 months."""
    return _start_of(timezone.localdate(now) - relativedelta(months=3)), None


def _get_half_year_dates(now):
    """Last 6 months."""
    return _start_of(timezone.localdate(now) - relativedelta(months=6)), None


def _get_custom_dates(date_from: str, date_to: str):
    """Custom YYYY-MM-DD range, end day included."""
    try:
        from_date = datetime.strptime(date_from, '%Y-%m-%d').date()
        to_date = datetime.strptime(date_to, '%Y-%m-%d').date()
    except (ValueError, TypeError):
        return None

    if to_date < from_date:
        from_date, to_date = to_date, from_date

    return _start_of(from_date), _start_of(to_date + timedelta(days=1))
