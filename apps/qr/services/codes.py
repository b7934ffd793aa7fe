"""
QR code record operations: create, edit destination, delete, list, history.
"""
import logging

from django.core.exceptions import ValidationError
from django.core.paginator import Page, Paginator
from django.core.validators import URLValidator
from django.db.models import Q, QuerySet
from django.db.models.functions import Lower
from django.utils import timezone

from apps.qr.events import QR_CODE_GENERATED, track_event
from apps.qr.models import QRCode, QRScan
from apps.qr.store import ScanStore, get_default_store
from .generator import QRGeneratorService

logger = logging.getLogger(__name__)

QR_PER_PAGE = 9
SCANS_PER_PAGE = 10

SORT_ORDERS = {
    'newest': ('-created_at',),
    'oldest': ('created_at',),
    'most-scanned': ('-scans', '-created_at'),
    'least-scanned': ('scans', '-created_at'),
    'alphabetical': (Lower('title'), '-created_at'),
}

_url_validator = URLValidator(schemes=['http', 'https'])


def validate_destination_url(url: str) -> str:
    """Return the stripped URL or raise ValidationError."""
    url = (url or '').strip()
    if not url.startswith('http'):
        raise ValidationError('Please provide a valid destination URL (e.g., https://example.com)')
    _url_validator(url)
    return url


def create_qr(owner, qr_type: str, content: str, title: str = '') -> QRCode:
    """
    Create a QR code and render its image.

    URL codes are dynamic: the record is saved first so the image can encode
    the tracking URL built from its id. Other types encode content directly.

    Args:
        owner: User owning the code (may be None)
        qr_type: One of QRCode.Type values
        content: Payload built by services.content.build_content
        title: Display title, defaults to "<TYPE> QR Code"

    Returns:
        Saved QRCode with image set
    """
    if qr_type not in QRCode.Type.values:
        raise ValidationError(f'Unknown QR code type: {qr_type}')

    if not content or not content.strip():
        raise ValidationError('Please enter content for your QR code')

    title = (title or '').strip() or f'{qr_type.upper()} QR Code'

    if qr_type == QRCode.Type.URL:
        destination_url = validate_destination_url(content)
        qr = QRCode.objects.create(
            owner=owner,
            type=qr_type,
            title=title,
            content=destination_url,
            destination_url=destination_url,
        )
        qr.image = QRGeneratorService.generate_to_data_url(qr.get_tracking_url())
        qr.save(update_fields=['image'])
    else:
        qr = QRCode.objects.create(
            owner=owner,
            type=qr_type,
            title=title,
            content=content,
            destination_url='',
            image=QRGeneratorService.generate_to_data_url(content),
        )

    logger.info(f'Created {qr_type} QR code {qr.id}')
    track_event(QR_CODE_GENERATED, qr)
    return qr


def update_destination(qr: QRCode, new_url: str, store: ScanStore | None = None) -> QRCode:
    """Point a dynamic code somewhere else. Content follows the destination."""
    if not qr.is_dynamic:
        raise ValidationError('Only URL QR codes have an editable destination')

    new_url = validate_destination_url(new_url)
    fields = {
        'destination_url': new_url,
        'content': new_url,
        'updated_at': timezone.now(),
    }

    store = store or get_default_store()
    store.update_record(qr.id, **fields)

    for name, value in fields.items():
        setattr(qr, name, value)

    logger.info(f'Updated destination of QR code {qr.id}')
    return qr


def delete_qr(qr: QRCode) -> None:
    """Delete a code together with its scan history."""
    qr_id = qr.id
    qr.delete()
    logger.info(f'Deleted QR code {qr_id}')


def filter_qr_codes(
    queryset: QuerySet,
    search: str = '',
    qr_type: str = 'all',
    sort: str = 'newest'
) -> QuerySet:
    """Search title/content, filter by type and sort. Unknown sorts mean newest."""
    search = (search or '').strip()
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(content__icontains=search))

    if qr_type and qr_type != 'all':
        queryset = queryset.filter(type=qr_type)

    return queryset.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS['newest']))


def paginate(items, page, per_page: int) -> Page:
    """Page of items; invalid numbers give page 1, past the end gives the last page."""
    return Paginator(items, per_page).get_page(page)


def get_scan_history(qr: QRCode) -> QuerySet:
    return QRScan.objects.filter(qr_id=qr.id).order_by('-scanned_at')


def get_available_types(queryset: QuerySet) -> list[str]:
    return sorted(set(queryset.values_list('type', flat=True)))


def purge_orphan_scans(dry_run: bool = False) -> int:
    """Delete scans whose QR code does not exist. Returns how many matched."""
    orphans = QRScan.objects.exclude(qr_id__in=QRCode.objects.values('id'))
    count = orphans.count()

    if count and not dry_run:
        orphans.delete()
        logger.info(f'Purged {count} orphan scans')

    return count


def serialize_qr(qr: QRCode, include_image: bool = True) -> dict:
    data = {
        'id': qr.id,
        'title': qr.title,
        'type': qr.type,
        'content': qr.content,
        'destination_url': qr.destination_url,
        'is_dynamic': qr.is_dynamic,
        'tracking_url': qr.get_tracking_url() if qr.is_dynamic else None,
        'scans': qr.scans,
        'created_at': qr.created_at.isoformat(),
        'updated_at': qr.updated_at.isoformat() if qr.updated_at else None,
        'owner_id': str(qr.owner_id) if qr.owner_id else None,
    }
    if include_image:
        data['image'] = qr.image
    return data


def serialize_scan(scan: QRScan) -> dict:
    scanned_at = timezone.localtime(scan.scanned_at)
    return {
        'id': scan.id,
        'timestamp': scanned_at.isoformat(),
        'date': scanned_at.date().isoformat(),
        'time': scanned_at.strftime('%H:%M:%S'),
        'day_of_week': scanned_at.strftime('%A'),
    }
