"""Tests for the scan tracking handler."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from django.db import DatabaseError
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings

from apps.qr.models import QRCode, QRScan
from apps.qr.store import DjangoScanStore, StoreError
from apps.qr.tracking import ScanTracker
from apps.qr.views import TrackView
from .fakes import InMemoryScanStore


class ScanTrackerTests(SimpleTestCase):
    """Handler behavior against the in-memory store."""

    def setUp(self):
        self.store = InMemoryScanStore(records=[
            {'id': 'abc123', 'destination_url': 'https://example.com', 'scans': 5},
            {'id': 'static1', 'destination_url': '', 'scans': 0},
        ])
        self.tracker = ScanTracker(self.store)

    def test_successful_scan_redirects_with_307(self):
        """A known code with a destination is recorded, counted and redirected."""
        response = self.tracker.track('abc123')

        self.assertEqual(response.status_code, 307)
        self.assertEqual(response['Location'], 'https://example.com')
        self.assertEqual(self.store.counter('abc123'), 6)
        self.assertEqual(self.store.scan_count('abc123'), 1)

    def test_steps_run_in_order(self):
        """Scan write, then increment, then read."""
        self.tracker.track('abc123')
        self.assertEqual(self.store.calls, ['add', 'increment', 'get'])

    def test_missing_id_returns_400_without_store_access(self):
        """Empty or missing identifiers never touch the store."""
        for qr_id in ('', None, '   '):
            response = self.tracker.track(qr_id)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.content, b'QR Code ID is missing')

        self.assertEqual(self.store.calls, [])
        self.assertEqual(self.store.scans, {})

    def test_unknown_id_returns_404_after_writes(self):
        """Unknown ids are checked explicitly after the write steps."""
        response = self.tracker.track('ghost')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.content, b'QR Code not found')
        self.assertEqual(self.store.calls, ['add', 'increment', 'get'])

    def test_empty_destination_returns_404(self):
        """Missing destination has its own message."""
        response = self.tracker.track('static1')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.content, b'Destination URL not found')
        self.assertEqual(self.store.counter('static1'), 1)

    def test_add_failure_returns_500(self):
        """A failed scan write stops before the increment."""
        store = InMemoryScanStore(
            records=[{'id': 'abc123', 'destination_url': 'https://example.com', 'scans': 5}],
            fail_on='add',
        )
        with self.assertLogs('apps.qr.tracking', level='ERROR'):
            response = ScanTracker(store).track('abc123')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.content, b'An internal error occurred')
        self.assertEqual(store.calls, ['add'])
        self.assertEqual(store.counter('abc123'), 5)

    def test_increment_failure_keeps_recorded_scan(self):
        """Partial failure: the scan stays, the counter under-counts it."""
        store = InMemoryScanStore(
            records=[{'id': 'abc123', 'destination_url': 'https://example.com', 'scans': 5}],
            fail_on='increment',
        )
        with self.assertLogs('apps.qr.tracking', level='ERROR'):
            response = ScanTracker(store).track('abc123')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(store.scan_count('abc123'), 1)
        self.assertEqual(store.counter('abc123'), 5)

    def test_read_failure_returns_500(self):
        store = InMemoryScanStore(
            records=[{'id': 'abc123', 'destination_url': 'https://example.com'}],
            fail_on='get',
        )
        with self.assertLogs('apps.qr.tracking', level='ERROR'):
            response = ScanTracker(store).track('abc123')

        self.assertEqual(response.status_code, 500)

    def test_unexpected_error_is_logged_not_leaked(self):
        """Unexpected exceptions give a generic 500; details go to the log."""
        with patch.object(self.store, 'get_record', side_effect=RuntimeError('secret detail')):
            with self.assertLogs('apps.qr.tracking', level='ERROR') as logs:
                response = self.tracker.track('abc123')

        self.assertEqual(response.status_code, 500)
        self.assertNotIn(b'secret detail', response.content)
        self.assertIn('abc123', logs.output[0])
        self.assertEqual(str(logs.records[0].exc_info[1]), 'secret detail')

    def test_disallowed_destination_scheme_returns_500(self):
        """Destinations the redirect refuses are treated as internal errors."""
        self.store.put('bad', destination_url='javascript:alert(1)')

        with self.assertLogs('apps.qr.tracking', level='ERROR'):
            response = self.tracker.track('bad')

        self.assertEqual(response.status_code, 500)

    def test_error_redirect_policy(self):
        """With a fallback URL configured, backend failures redirect there."""
        store = InMemoryScanStore(fail_on='add')
        tracker = ScanTracker(store, error_redirect_url='https://app.example.com')

        with self.assertLogs('apps.qr.tracking', level='ERROR'):
            response = tracker.track('abc123')

        self.assertEqual(response.status_code, 307)
        self.assertEqual(response['Location'], 'https://app.example.com')

    def test_error_redirect_policy_keeps_client_errors(self):
        """400 and 404 are not turned into redirects."""
        tracker = ScanTracker(self.store, error_redirect_url='https://app.example.com')

        self.assertEqual(tracker.track('').status_code, 400)
        self.assertEqual(tracker.track('ghost').status_code, 404)

    def test_repeated_scans_are_not_deduplicated(self):
        for _ in range(3):
            self.tracker.track('abc123')

        self.assertEqual(self.store.scan_count('abc123'), 3)
        self.assertEqual(self.store.counter('abc123'), 8)

    def test_concurrent_scans_lose_no_updates(self):
        """Each concurrent request records its own scan and increment."""
        with ThreadPoolExecutor(max_workers=8) as pool:
            responses = list(pool.map(self.tracker.track, ['abc123'] * 40))

        self.assertTrue(all(r.status_code == 307 for r in responses))
        self.assertEqual(self.store.scan_count('abc123'), 40)
        self.assertEqual(self.store.counter('abc123'), 45)


class TrackViewInjectionTests(SimpleTestCase):
    """The view takes its store as an explicit dependency."""

    def setUp(self):
        self.factory = RequestFactory()
        self.store = InMemoryScanStore(records=[
            {'id': 'abc123', 'destination_url': 'https://example.com', 'scans': 5},
        ])
        self.view = TrackView.as_view(store=self.store)

    def test_view_uses_injected_store(self):
        response = self.view(self.factory.get('/t/abc123'), qr_id='abc123')

        self.assertEqual(response.status_code, 307)
        self.assertEqual(self.store.counter('abc123'), 6)

    def test_view_without_id_returns_400(self):
        response = self.view(self.factory.get('/t/'))
        self.assertEqual(response.status_code, 400)

    def test_post_not_allowed(self):
        response = self.view(self.factory.post('/t/abc123'), qr_id='abc123')

        self.assertEqual(response.status_code, 405)
        self.assertEqual(self.store.calls, [])

    @override_settings(QR_TRACKING_ERROR_REDIRECT_URL='https://app.example.com')
    def test_view_reads_error_redirect_setting(self):
        view = TrackView.as_view(store=InMemoryScanStore(fail_on='add'))

        with self.assertLogs('apps.qr.tracking', level='ERROR'):
            response = view(self.factory.get('/t/abc123'), qr_id='abc123')

        self.assertEqual(response.status_code, 307)
        self.assertEqual(response['Location'], 'https://app.example.com')


class TrackEndpointTests(TestCase):
    """End-to-end tracking through the URL routes and the database."""

    def setUp(self):
        self.qr = QRCode.objects.create(
            id='abc123',
            title='Example',
            type=QRCode.Type.URL,
            content='https://example.com',
            destination_url='https://example.com',
            scans=5,
        )

    def test_scan_redirects_and_counts(self):
        """abc123 with 5 scans: counter 6, one scan, 307 to the destination."""
        response = self.client.get('/t/abc123')

        self.qr.refresh_from_db()
        self.assertEqual(response.status_code, 307)
        self.assertEqual(response['Location'], 'https://example.com')
        self.assertEqual(self.qr.scans, 6)
        self.assertEqual(QRScan.objects.filter(qr=self.qr).count(), 1)

    def test_api_track_route(self):
        """The /api/track/{qrId} route behaves the same way."""
        response = self.client.get('/api/track/abc123')

        self.qr.refresh_from_db()
        self.assertEqual(response.status_code, 307)
        self.assertEqual(self.qr.scans, 6)

    def test_scan_timestamp_is_server_assigned(self):
        self.client.get('/t/abc123?timestamp=2001-01-01T00:00:00Z')

        scan = QRScan.objects.get(qr=self.qr)
        self.assertGreater(scan.scanned_at.year, 2001)

    def test_empty_id_writes_nothing(self):
        """Empty path: 400, no scans, no counter change."""
        for path in ('/t/', '/api/track/'):
            response = self.client.get(path)
            self.assertEqual(response.status_code, 400)

        self.qr.refresh_from_db()
        self.assertEqual(self.qr.scans, 5)
        self.assertEqual(QRScan.objects.count(), 0)

    def test_ghost_id_returns_404(self):
        """Unknown ids answer 404 after the scan write."""
        response = self.client.get('/t/ghost')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.content, b'QR Code not found')
        # The scan write is not validated against the parent
        self.assertEqual(QRScan.objects.filter(qr_id='ghost').count(), 1)

    def test_over_long_id_returns_404(self):
        """An unknown id too long for the key column is still a plain not-found."""
        with self.assertLogs('apps.qr.store', level='WARNING'):
            response = self.client.get('/t/' + 'g' * 40)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.content, b'QR Code not found')
        self.assertEqual(QRScan.objects.count(), 0)

    def test_static_code_without_destination_returns_404(self):
        QRCode.objects.create(
            id='text1',
            title='Hello',
            type=QRCode.Type.TEXT,
            content='Hello',
        )
        response = self.client.get('/t/text1')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.content, b'Destination URL not found')

    def test_database_error_on_scan_write_returns_500(self):
        with patch('apps.qr.store.QRScan.objects.create', side_effect=DatabaseError('db down')):
            with self.assertLogs('apps.qr.tracking', level='ERROR'):
                response = self.client.get('/t/abc123')

        self.qr.refresh_from_db()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.content, b'An internal error occurred')
        self.assertEqual(self.qr.scans, 5)

    def test_increment_failure_leaves_scan_recorded(self):
        with patch.object(DjangoScanStore, 'increment_scan_counter', side_effect=StoreError('locked')):
            with self.assertLogs('apps.qr.tracking', level='ERROR'):
                response = self.client.get('/t/abc123')

        self.qr.refresh_from_db()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(self.qr.scans, 5)
        self.assertEqual(QRScan.objects.filter(qr=self.qr).count(), 1)

    def test_multiple_scans_tracked_separately(self):
        for _ in range(5):
            response = self.client.get('/t/abc123')
            self.assertEqual(response.status_code, 307)

        self.qr.refresh_from_db()
        self.assertEqual(self.qr.scans, 10)
        self.assertEqual(QRScan.objects.filter(qr=self.qr).count(), 5)

    def test_tracking_requires_no_login(self):
        """The endpoint is public."""
        response = self.client.get('/t/abc123')
        self.assertNotIn('/accounts/login/', response['Location'])
