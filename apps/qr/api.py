"""JSON API for the owner's QR codes."""

import json
import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.text import slugify
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .events import QR_CODE_COPIED, QR_CODE_DOWNLOADED, track_event
from .models import QRCode
from .services import (
    QR_PER_PAGE,
    SCANS_PER_PAGE,
    QRGeneratorService,
    build_content,
    create_qr,
    delete_qr,
    filter_qr_codes,
    get_available_types,
    get_scan_history,
    paginate,
    serialize_qr,
    serialize_scan,
    update_destination,
)

logger = logging.getLogger(__name__)


def _load_json(request):
    try:
        data = json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _error(message, status=400):
    return JsonResponse({'error': message}, status=status)


def _validation_message(error: ValidationError) -> str:
    return ' '.join(error.messages)


@login_required
@require_http_methods(['GET', 'POST'])
def qr_collection(request):
    """GET: list the user's codes. POST: create a code."""
    if request.method == 'POST':
        return _create(request)

    owned = QRCode.objects.filter(owner=request.user)
    qr_codes = filter_qr_codes(
        owned,
        search=request.GET.get('search', ''),
        qr_type=request.GET.get('type', 'all'),
        sort=request.GET.get('sort', 'newest'),
    )
    page = paginate(qr_codes, request.GET.get('page'), QR_PER_PAGE)

    return JsonResponse({
        'results': [serialize_qr(qr) for qr in page],
        'page': page.number,
        'num_pages': page.paginator.num_pages,
        'count': page.paginator.count,
        'types': get_available_types(owned),
    })


def _create(request):
    data = _load_json(request)
    if data is None:
        return _error('Invalid JSON')

    qr_type = data.get('type', QRCode.Type.URL)
    if not isinstance(qr_type, str):
        return _error('Unknown QR code type')

    fields = {key: value for key, value in data.items() if isinstance(value, str)}
    fields.pop('type', None)
    title = fields.pop('title', '')

    try:
        content = build_content(qr_type, **fields)
        qr = create_qr(request.user, qr_type, content, title=title)
    except ValueError as e:
        return _error(str(e))
    except ValidationError as e:
        return _error(_validation_message(e))

    return JsonResponse(serialize_qr(qr), status=201)


@login_required
@require_GET
def qr_detail(request, qr_id):
    qr = get_object_or_404(QRCode, id=qr_id, owner=request.user)
    return JsonResponse(serialize_qr(qr))


@login_required
@require_POST
def qr_update_destination(request, qr_id):
    """Change where a dynamic code redirects"""
    qr = get_object_or_404(QRCode, id=qr_id, owner=request.user)

    data = _load_json(request)
    if data is None:
        return _error('Invalid JSON')

    try:
        update_destination(qr, data.get('destination_url', ''))
    except ValidationError as e:
        return _error(_validation_message(e))

    return JsonResponse(serialize_qr(qr))


@login_required
@require_POST
def qr_delete(request, qr_id):
    qr = get_object_or_404(QRCode, id=qr_id, owner=request.user)
    delete_qr(qr)
    return JsonResponse({'success': True, 'id': qr_id})


@login_required
@require_GET
def qr_scans(request, qr_id):
    """Scan history, newest first"""
    qr = get_object_or_404(QRCode, id=qr_id, owner=request.user)
    page = paginate(get_scan_history(qr), request.GET.get('page'), SCANS_PER_PAGE)

    return JsonResponse({
        'qr_id': qr.id,
        'results': [serialize_scan(scan) for scan in page],
        'page': page.number,
        'num_pages': page.paginator.num_pages,
        'count': page.paginator.count,
    })


@login_required
@require_GET
def qr_download(request, qr_id):
    """Download the code as a PNG file."""
    qr = get_object_or_404(QRCode, id=qr_id, owner=request.user)

    buffer = QRGeneratorService.generate_to_buffer(
        qr.get_encoded_payload(),
        fill_color=request.GET.get('fill_color', 'black'),
        back_color=request.GET.get('back_color', 'white'),
    )
    track_event(QR_CODE_DOWNLOADED, qr)

    filename = f'{slugify(qr.title) or "qrcode"}.png'
    response = HttpResponse(buffer.getvalue(), content_type='image/png')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@login_required
@require_POST
def qr_copied(request, qr_id):
    """Record that the image was copied to the clipboard."""
    qr = get_object_or_404(QRCode, id=qr_id, owner=request.user)
    track_event(QR_CODE_COPIED, qr)
    return JsonResponse({'success': True})
