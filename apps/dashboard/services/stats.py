"""
Headline numbers for the analytics dashboard.
"""
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, Q, QuerySet, Sum

from apps.qr.models import QRScan


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up: 2.5 -> 3."""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def filter_scans(
    qr_codes: QuerySet,
    start: datetime | None = None,
    end: datetime | None = None
) -> QuerySet:
    """Scans of the given codes inside [start, end)."""
    scans = QRScan.objects.filter(qr_id__in=qr_codes.values('id'))
    if start:
        scans = scans.filter(scanned_at__gte=start)
    if end:
        scans = scans.filter(scanned_at__lt=end)
    return scans


def get_most_scanned_type(qr_codes: QuerySet) -> str:
    """Type with the most scans in total, 'none' without codes."""
    top = (
        qr_codes.values('type')
        .annotate(total=Sum('scans'))
        .order_by('-total', 'type')
        .first()
    )
    return top['type'] if top else 'none'


def get_dashboard_stats(
    qr_codes: QuerySet,
    start: datetime | None = None,
    end: datetime | None = None
) -> dict:
    """Totals over the user's codes plus scan activity inside the range."""
    totals = qr_codes.aggregate(
        total_qrs=Count('id'),
        total_scans=Sum('scans'),
        active_qrs=Count('id', filter=Q(scans__gt=0)),
    )
    total_qrs = totals['total_qrs']
    total_scans = totals['total_scans'] or 0

    return {
        'total_qrs': total_qrs,
        'total_scans': total_scans,
        'avg_scans_per_qr': round_half_up(total_scans / total_qrs) if total_qrs else 0,
        'active_qrs': totals['active_qrs'],
        'most_scanned_type': get_most_scanned_type(qr_codes),
        'recent_activity': filter_scans(qr_codes, start, end).count(),
    }
