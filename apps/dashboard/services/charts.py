"""
Chart data builders for dashboard.
"""
import math
from datetime import datetime

from django.db.models import Count, QuerySet, Sum
from django.db.models.functions import ExtractHour, ExtractIsoWeekDay, TruncDate
from django.utils import timezone

from apps.qr.models import QRCode
from apps.qr.services import get_scan_history, serialize_qr, serialize_scan
from .stats import filter_scans, round_half_up

DAY_NAMES = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']
TOP_LIMIT = 5
RECENT_SCANS_LIMIT = 10


def build_chart_data(
    qr_codes: QuerySet,
    start: datetime | None = None,
    end: datetime | None = None
) -> dict:
    """Build data for all dashboard charts."""
    scans = filter_scans(qr_codes, start, end)

    return {
        'type_data': get_type_data(qr_codes),
        'daily_activity': get_daily_activity(scans),
        'day_of_week': get_day_of_week_data(scans),
        'hourly': get_hourly_data(scans),
        'top_performing': get_top_performing(qr_codes),
    }


def get_type_data(qr_codes: QuerySet) -> list[dict]:
    """Codes and scans per type."""
    rows = (
        qr_codes.values('type')
        .annotate(count=Count('id'), scans=Sum('scans'))
        .order_by('type')
    )
    return [
        {
            'type': row['type'],
            'count': row['count'],
            'scans': row['scans'] or 0,
            'avg_scans': round_half_up((row['scans'] or 0) / row['count']),
        }
        for row in rows
    ]


def get_daily_activity(scans: QuerySet) -> list[dict]:
    """Scan counts per calendar day, oldest first."""
    rows = (
        scans.order_by()
        .annotate(day=TruncDate('scanned_at'))
        .values('day')
        .annotate(scans=Count('id'))
        .order_by('day')
    )
    return [{'date': row['day'].isoformat(), 'scans': row['scans']} for row in rows]


def get_day_of_week_data(scans: QuerySet) -> list[dict]:
    """Scan counts per weekday, Monday first."""
    counts = dict(
        scans.order_by()
        .annotate(weekday=ExtractIsoWeekDay('scanned_at'))
        .values('weekday')
        .annotate(scans=Count('id'))
        .values_list('weekday', 'scans')
    )
    return [
        {'day': name, 'scans': counts.get(index, 0)}
        for index, name in enumerate(DAY_NAMES, start=1)
    ]


def get_hourly_data(scans: QuerySet) -> list[dict]:
    """Scan counts per hour of day, 0:00 to 23:00."""
    counts = dict(
        scans.order_by()
        .annotate(hour=ExtractHour('scanned_at'))
        .values('hour')
        .annotate(scans=Count('id'))
        .values_list('hour', 'scans')
    )
    return [{'hour': f'{hour}:00', 'scans': counts.get(hour, 0)} for hour in range(24)]


def get_top_performing(qr_codes: QuerySet, limit: int = TOP_LIMIT) -> list[dict]:
    top = qr_codes.order_by('-scans', '-created_at')[:limit]
    return [serialize_qr(qr, include_image=False) for qr in top]


def get_qr_analytics(qr: QRCode) -> dict:
    """Analytics for a single code."""
    history = get_scan_history(qr)
    has_history = history.exists()

    days_alive = max(1, math.ceil((timezone.now() - qr.created_at).total_seconds() / 86400))

    return {
        'qr': serialize_qr(qr, include_image=False),
        'total_scans': qr.scans,
        'type': qr.type,
        'created_at': qr.created_at.isoformat(),
        'created_weekday': timezone.localtime(qr.created_at).strftime('%A'),
        'avg_daily': round_half_up(qr.scans / days_alive) if has_history else 0,
        'scans_over_time': get_daily_activity(history),
        'recent_scans': [serialize_scan(scan) for scan in history[:RECENT_SCANS_LIMIT]],
    }
