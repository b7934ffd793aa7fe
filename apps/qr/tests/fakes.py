"""In-memory store used to exercise scan tracking without a database."""

from threading import Lock

from django.utils import timezone

from apps.qr.models import QRCode
from apps.qr.store import ScanStore, StoreError


class InMemoryScanStore(ScanStore):
    """
    Dict-backed store. Set fail_on to 'add', 'increment' or 'get' to make
    that operation raise StoreError.
    """

    def __init__(self, records=None, fail_on=None):
        self.records = {}
        self.scans = {}
        self.fail_on = fail_on
        self.calls = []
        self.lock = Lock()
        for record in records or []:
            self.put(**record)

    def put(self, id, destination_url='', scans=0, **fields):
        self.records[id] = {'destination_url': destination_url, 'scans': scans, **fields}

    def scan_count(self, qr_id):
        return len(self.scans.get(qr_id, []))

    def counter(self, qr_id):
        return self.records[qr_id]['scans']

    def _maybe_fail(self, operation):
        self.calls.append(operation)
        if self.fail_on == operation:
            raise StoreError(f'{operation} failed')

    def add_scan_record(self, qr_id):
        self._maybe_fail('add')
        with self.lock:
            self.scans.setdefault(qr_id, []).append(timezone.now())

    def increment_scan_counter(self, qr_id, delta=1):
        self._maybe_fail('increment')
        with self.lock:
            if qr_id in self.records:
                self.records[qr_id]['scans'] += delta

    def get_record(self, qr_id):
        self._maybe_fail('get')
        record = self.records.get(qr_id)
        if record is None:
            return None
        return QRCode(id=qr_id, **record)

    def update_record(self, qr_id, **fields):
        self._maybe_fail('update')
        if qr_id not in self.records:
            raise QRCode.DoesNotExist(qr_id)
        self.records[qr_id].update(fields)
