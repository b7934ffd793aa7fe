"""
Site-wide administration: overview numbers and user/QR management.
"""
import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet, Sum
from django.utils import timezone

from apps.dashboard.services import round_half_up
from apps.qr.models import QRCode

logger = logging.getLogger(__name__)

User = get_user_model()

ACTIVE_USER_DAYS = 7


class AdminActionError(Exception):
    """An admin action that is refused (e.g. acting on your own account)."""


def get_overview_stats() -> dict:
    total_users = User.objects.count()
    total_qr_codes = QRCode.objects.count()
    active_since = timezone.now() - timedelta(days=ACTIVE_USER_DAYS)

    return {
        'total_users': total_users,
        'total_qr_codes': total_qr_codes,
        'total_scans': QRCode.objects.aggregate(total=Sum('scans'))['total'] or 0,
        'active_users': User.objects.filter(last_login__gte=active_since).count(),
        'admin_users': User.objects.filter(is_staff=True).count(),
        'avg_qrs_per_user': round_half_up(total_qr_codes / total_users) if total_users else 0,
    }


def search_users(search: str = '') -> QuerySet:
    users = User.objects.order_by('-created_at')
    search = (search or '').strip()
    if search:
        users = users.filter(
            Q(display_name__icontains=search) |
            Q(email__icontains=search) |
            Q(phone_number__icontains=search)
        )
    return users


def search_qr_codes(search: str = '') -> QuerySet:
    qr_codes = QRCode.objects.select_related('owner').order_by('-created_at')
    search = (search or '').strip()
    if search:
        qr_codes = qr_codes.filter(
            Q(title__icontains=search) |
            Q(content__icontains=search) |
            Q(type__icontains=search)
        )
    return qr_codes


def delete_user(actor, user) -> int:
    """
    Delete a user together with their QR codes and scans.

    Returns:
        Number of QR codes removed with the user
    """
    if actor.pk == user.pk:
        raise AdminActionError('You cannot delete your own account')

    qr_count = user.qr_codes.count()
    email = user.email
    user.delete()

    logger.info(f'{actor.email} deleted user {email} and {qr_count} QR codes')
    return qr_count


def toggle_admin(actor, user) -> bool:
    """Flip the admin flag. Returns the new value."""
    if actor.pk == user.pk and user.is_staff:
        raise AdminActionError('You cannot revoke your own admin status')

    user.is_staff = not user.is_staff
    user.save(update_fields=['is_staff'])

    action = 'granted' if user.is_staff else 'revoked'
    logger.info(f'{actor.email} {action} admin status for {user.email}')
    return user.is_staff


def serialize_user(user) -> dict:
    return {
        'id': str(user.id),
        'email': user.email,
        'display_name': user.get_display_name(),
        'phone_number': user.phone_number,
        'is_admin': user.is_admin,
        'is_active': user.is_active,
        'created_at': user.created_at.isoformat(),
        'last_login': user.last_login.isoformat() if user.last_login else None,
    }
