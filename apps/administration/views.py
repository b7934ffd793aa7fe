from functools import wraps

from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from apps.qr.models import QRCode
from apps.qr.services import delete_qr, serialize_qr
from .services import (
    AdminActionError,
    delete_user,
    get_overview_stats,
    search_qr_codes,
    search_users,
    serialize_user,
    toggle_admin,
)

User = get_user_model()


def admin_required(view):
    """Login required, then 403 for non-admin users."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_staff:
            return JsonResponse({'error': 'Admin access required'}, status=403)
        return view(request, *args, **kwargs)
    return login_required(wrapper)


@admin_required
@require_GET
def overview(request):
    return JsonResponse({'stats': get_overview_stats()})


@admin_required
@require_GET
def users_list(request):
    users = search_users(request.GET.get('search', ''))
    return JsonResponse({'results': [serialize_user(user) for user in users]})


@admin_required
@require_GET
def qr_list(request):
    qr_codes = search_qr_codes(request.GET.get('search', ''))
    return JsonResponse({
        'results': [serialize_qr(qr, include_image=False) for qr in qr_codes],
    })


@admin_required
@require_POST
def user_delete(request, user_id):
    """Delete a user and everything they own"""
    user = get_object_or_404(User, id=user_id)
    try:
        qr_count = delete_user(request.user, user)
    except AdminActionError as e:
        return JsonResponse({'error': str(e)}, status=400)

    return JsonResponse({'success': True, 'deleted_qr_codes': qr_count})


@admin_required
@require_POST
def user_toggle_admin(request, user_id):
    user = get_object_or_404(User, id=user_id)
    try:
        is_admin = toggle_admin(request.user, user)
    except AdminActionError as e:
        return JsonResponse({'error': str(e)}, status=400)

    return JsonResponse({'success': True, 'is_admin': is_admin})


@admin_required
@require_POST
def qr_delete(request, qr_id):
    qr = get_object_or_404(QRCode, id=qr_id)
    delete_qr(qr)
    return JsonResponse({'success': True, 'id': qr_id})
