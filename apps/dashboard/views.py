from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET

from apps.qr.models import QRCode
from .services import build_chart_data, get_dashboard_stats, get_date_range, get_qr_analytics


@login_required
@require_GET
def dashboard_index(request):
    """Stats and chart data for the user's QR codes"""
    period = request.GET.get('period', '')
    date_from = request.GET.get('date_from')
    date_to = request.GET.get('date_to')

    start, end = get_date_range(period, date_from, date_to)
    qr_codes = QRCode.objects.filter(owner=request.user)

    return JsonResponse({
        'period': period or 'last_30_days',
        'range': {
            'start': start.isoformat() if start else None,
            'end': end.isoformat() if end else None,
        },
        'stats': get_dashboard_stats(qr_codes, start, end),
        'charts': build_chart_data(qr_codes, start, end),
    })


@login_required
@require_GET
def qr_analytics(request, qr_id):
    """Analytics for a single QR code"""
    qr = get_object_or_404(QRCode, id=qr_id, owner=request.user)
    return JsonResponse(get_qr_analytics(qr))
