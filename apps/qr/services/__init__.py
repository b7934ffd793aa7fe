"""
QR services package.
Re-exports the functions views and tasks use.
"""
from .content import build_content

from .generator import QRGeneratorService

from .codes import (
    QR_PER_PAGE,
    SCANS_PER_PAGE,
    create_qr,
    update_destination,
    delete_qr,
    filter_qr_codes,
    paginate,
    get_scan_history,
    get_available_types,
    purge_orphan_scans,
    serialize_qr,
    serialize_scan,
)

__all__ = [
    # Content
    'build_content',
    # Rendering
    'QRGeneratorService',
    # Records
    'QR_PER_PAGE',
    'SCANS_PER_PAGE',
    'create_qr',
    'update_destination',
    'delete_qr',
    'filter_qr_codes',
    'paginate',
    'get_scan_history',
    'get_available_types',
    'purge_orphan_scans',
    'serialize_qr',
    'serialize_scan',
]
