"""
Store interface used by scan tracking and destination edits.

The tracking view gets a store instance explicitly, so tests can pass an
in-memory implementation instead of touching the database.
"""
import logging

from django.db import DatabaseError
from django.db.models import F

from .models import QRCode, QRScan

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A store operation failed (database unreachable, locked, etc.)."""


class ScanStore:
    """Minimal CRUD contract over QR records and their scans."""

    def add_scan_record(self, qr_id: str) -> None:
        """Append a scan with a server-assigned timestamp."""
        raise NotImplementedError

    def increment_scan_counter(self, qr_id: str, delta: int = 1) -> None:
        """Atomically add delta to the record's counter."""
        raise NotImplementedError

    def get_record(self, qr_id: str) -> QRCode | None:
        """Return the record, or None when it does not exist."""
        raise NotImplementedError

    def update_record(self, qr_id: str, **fields) -> None:
        raise NotImplementedError


class DjangoScanStore(ScanStore):
    """ORM-backed store. Database errors surface as StoreError."""

    def add_scan_record(self, qr_id: str) -> None:
        # Longer ids cannot name a code and do not fit the scan's qr_id column
        if len(qr_id) > QRCode._meta.pk.max_length:
            logger.warning(f'Not recording scan for over-long QR ID: {qr_id[:50]}')
            return

        try:
            QRScan.objects.create(qr_id=qr_id)
        except DatabaseError as e:
            raise StoreError(f'Could not add scan record for {qr_id}') from e

    def increment_scan_counter(self, qr_id: str, delta: int = 1) -> None:
        # Single UPDATE ... SET scans = scans + delta; missing rows are a no-op
        try:
            QRCode.objects.filter(pk=qr_id).update(scans=F('scans') + delta)
        except DatabaseError as e:
            raise StoreError(f'Could not increment scan counter for {qr_id}') from e

    def get_record(self, qr_id: str) -> QRCode | None:
        try:
            return QRCode.objects.filter(pk=qr_id).first()
        except DatabaseError as e:
            raise StoreError(f'Could not read QR code {qr_id}') from e

    def update_record(self, qr_id: str, **fields) -> None:
        try:
            updated = QRCode.objects.filter(pk=qr_id).update(**fields)
        except DatabaseError as e:
            raise StoreError(f'Could not update QR code {qr_id}') from e

        if not updated:
            raise QRCode.DoesNotExist(f'QR code {qr_id} does not exist')

        logger.debug(f'Updated {sorted(fields)} on QR code {qr_id}')


def get_default_store() -> ScanStore:
    return DjangoScanStore()
