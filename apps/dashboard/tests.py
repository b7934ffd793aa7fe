"""Tests for dashboard analytics."""

from datetime import date, datetime, timedelta, timezone as dt_timezone

from dateutil.relativedelta import relativedelta
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from apps.accounts.models import User
from apps.qr.models import QRCode, QRScan
from .services import (
    build_chart_data,
    filter_scans,
    get_daily_activity,
    get_dashboard_stats,
    get_date_range,
    get_day_of_week_data,
    get_hourly_data,
    get_most_scanned_type,
    get_qr_analytics,
    get_top_performing,
    get_type_data,
    round_half_up,
)


def scan_at(qr, when):
    """Create a scan and move it to the given time."""
    scan = QRScan.objects.create(qr=qr)
    QRScan.objects.filter(pk=scan.pk).update(scanned_at=when)
    return scan


@override_settings(TIME_ZONE='UTC')
class DateRangeTests(TestCase):
    """Tests for period bounds."""

    def test_default_is_last_30_days(self):
        start, end = get_date_range()

        self.assertIsNone(end)
        self.assertAlmostEqual(
            (timezone.now() - start).total_seconds(),
            timedelta(days=30).total_seconds(),
            delta=5
        )

    def test_unknown_period_falls_back_to_default(self):
        start, end = get_date_range('fortnight')
        self.assertIsNone(end)
        self.assertLess(start, timezone.now() - timedelta(days=29))

    def test_all_is_unbounded(self):
        self.assertEqual(get_date_range('all'), (None, None))

    def test_week_starts_on_monday(self):
        start, end = get_date_range('week')

        self.assertIsNone(end)
        self.assertEqual(start.weekday(), 0)
        self.assertEqual((start.hour, start.minute), (0, 0))
        self.assertLessEqual(start, timezone.now())
        self.assertGreater(start, timezone.now() - timedelta(days=7))

    def test_month_starts_on_first_day(self):
        start, _ = get_date_range('month')

        today = timezone.localdate()
        self.assertEqual(start.date(), today.replace(day=1))

    def test_quarter_and_half_year(self):
        today = timezone.localdate()

        start, _ = get_date_range('quarter')
        self.assertEqual(start.date(), today - relativedelta(months=3))

        start, _ = get_date_range('half_year')
        self.assertEqual(start.date(), today - relativedelta(months=6))

    def test_custom_range_includes_end_day(self):
        start, end = get_date_range('custom', '2026-01-10', '2026-01-12')

        self.assertEqual(start.date(), date(2026, 1, 10))
        self.assertEqual(end.date(), date(2026, 1, 13))

    def test_custom_range_reversed_dates_are_swapped(self):
        start, end = get_date_range('custom', '2026-01-12', '2026-01-10')

        self.assertEqual(start.date(), date(2026, 1, 10))
        self.assertEqual(end.date(), date(2026, 1, 13))

    def test_custom_range_invalid_dates_fall_back(self):
        start, end = get_date_range('custom', 'yesterday', '2026-01-10')
        self.assertIsNone(end)
        self.assertIsNotNone(start)

        # Missing bound
        start, end = get_date_range('custom', '2026-01-10', None)
        self.assertIsNone(end)


class StatsTests(TestCase):
    """Tests for headline numbers."""

    def setUp(self):
        self.user = User.objects.create_user(email='owner@example.com', password='pass123')
        self.site = QRCode.objects.create(
            title='Site', type='url', content='https://a.io', destination_url='https://a.io',
            scans=3, owner=self.user
        )
        self.note = QRCode.objects.create(title='Note', type='text', content='hi', scans=10, owner=self.user)
        self.idle = QRCode.objects.create(
            title='Idle', type='url', content='https://b.io', destination_url='https://b.io',
            scans=0, owner=self.user
        )
        self.qr_codes = QRCode.objects.filter(owner=self.user)

    def test_totals(self):
        stats = get_dashboard_stats(self.qr_codes)

        self.assertEqual(stats['total_qrs'], 3)
        self.assertEqual(stats['total_scans'], 13)
        self.assertEqual(stats['avg_scans_per_qr'], 4)
        self.assertEqual(stats['active_qrs'], 2)
        self.assertEqual(stats['most_scanned_type'], 'text')

    def test_empty(self):
        stats = get_dashboard_stats(QRCode.objects.none())

        self.assertEqual(stats['total_qrs'], 0)
        self.assertEqual(stats['total_scans'], 0)
        self.assertEqual(stats['avg_scans_per_qr'], 0)
        self.assertEqual(stats['most_scanned_type'], 'none')
        self.assertEqual(stats['recent_activity'], 0)

    def test_average_rounds_half_up(self):
        """3 and 2 scans over two codes average to 3, not 2."""
        user = User.objects.create_user(email='half@example.com')
        QRCode.objects.create(title='A', type='text', content='a', scans=3, owner=user)
        QRCode.objects.create(title='B', type='text', content='b', scans=2, owner=user)

        stats = get_dashboard_stats(QRCode.objects.filter(owner=user))
        self.assertEqual(stats['avg_scans_per_qr'], 3)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(2.4), 2)
        self.assertEqual(round_half_up(13 / 3), 4)
        self.assertEqual(round_half_up(0), 0)

    def test_most_scanned_type_sums_per_type(self):
        QRCode.objects.filter(pk=self.idle.pk).update(scans=8)
        self.assertEqual(get_most_scanned_type(self.qr_codes), 'url')

    def test_recent_activity_uses_range(self):
        now = timezone.now()
        scan_at(self.site, now - timedelta(days=2))
        scan_at(self.site, now - timedelta(days=40))

        stats = get_dashboard_stats(self.qr_codes, now - timedelta(days=30), None)
        self.assertEqual(stats['recent_activity'], 1)

    def test_filter_scans_end_is_exclusive(self):
        boundary = timezone.now() - timedelta(days=1)
        scan_at(self.site, boundary)
        scan_at(self.site, boundary - timedelta(hours=1))

        self.assertEqual(filter_scans(self.qr_codes, None, boundary).count(), 1)
        self.assertEqual(filter_scans(self.qr_codes, boundary, None).count(), 1)

    def test_filter_scans_ignores_other_codes(self):
        other = QRCode.objects.create(title='Other', type='text', content='x')
        QRScan.objects.create(qr=other)
        QRScan.objects.create(qr=self.note)

        self.assertEqual(filter_scans(self.qr_codes).count(), 1)


@override_settings(TIME_ZONE='UTC')
class ChartTests(TestCase):
    """Tests for chart series."""

    def setUp(self):
        self.qr = QRCode.objects.create(
            title='Site', type='url', content='https://a.io', destination_url='https://a.io', scans=3
        )
        self.text = QRCode.objects.create(title='Note', type='text', content='hi', scans=2)
        # Wednesday 2026-03-04
        scan_at(self.qr, datetime(2026, 3, 4, 14, 30, tzinfo=dt_timezone.utc))
        scan_at(self.qr, datetime(2026, 3, 4, 14, 45, tzinfo=dt_timezone.utc))
        scan_at(self.qr, datetime(2026, 3, 8, 9, 0, tzinfo=dt_timezone.utc))
        self.scans = QRScan.objects.all()

    def test_daily_activity(self):
        self.assertEqual(get_daily_activity(self.scans), [
            {'date': '2026-03-04', 'scans': 2},
            {'date': '2026-03-08', 'scans': 1},
        ])

    def test_day_of_week_starts_monday(self):
        data = get_day_of_week_data(self.scans)

        self.assertEqual([row['day'] for row in data], ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun'])
        self.assertEqual(data[2]['scans'], 2)
        self.assertEqual(data[6]['scans'], 1)
        self.assertEqual(sum(row['scans'] for row in data), 3)

    def test_hourly_has_24_buckets(self):
        data = get_hourly_data(self.scans)

        self.assertEqual(len(data), 24)
        self.assertEqual(data[0]['hour'], '0:00')
        self.assertEqual(data[14], {'hour': '14:00', 'scans': 2})
        self.assertEqual(data[9], {'hour': '9:00', 'scans': 1})

    def test_type_data(self):
        self.assertEqual(get_type_data(QRCode.objects.all()), [
            {'type': 'text', 'count': 1, 'scans': 2, 'avg_scans': 2},
            {'type': 'url', 'count': 1, 'scans': 3, 'avg_scans': 3},
        ])

    def test_type_data_average_rounds_half_up(self):
        QRCode.objects.create(title='Note 2', type='text', content='yo', scans=3)

        text_row = get_type_data(QRCode.objects.all())[0]
        self.assertEqual((text_row['type'], text_row['scans'], text_row['avg_scans']), ('text', 5, 3))

    def test_top_performing(self):
        for i in range(6):
            QRCode.objects.create(title=f'Extra {i}', type='text', content='x', scans=1)

        top = get_top_performing(QRCode.objects.all())

        self.assertEqual(len(top), 5)
        self.assertEqual([row['title'] for row in top[:2]], ['Site', 'Note'])
        self.assertNotIn('image', top[0])

    def test_build_chart_data_applies_range(self):
        start = datetime(2026, 3, 5, tzinfo=dt_timezone.utc)
        charts = build_chart_data(QRCode.objects.all(), start, None)

        self.assertEqual(charts['daily_activity'], [{'date': '2026-03-08', 'scans': 1}])
        self.assertEqual(
            set(charts),
            {'type_data', 'daily_activity', 'day_of_week', 'hourly', 'top_performing'}
        )


class QRAnalyticsTests(TestCase):
    """Tests for single code analytics."""

    def setUp(self):
        self.qr = QRCode.objects.create(
            title='Site', type='url', content='https://a.io', destination_url='https://a.io', scans=4
        )

    def test_without_history(self):
        data = get_qr_analytics(self.qr)

        self.assertEqual(data['total_scans'], 4)
        self.assertEqual(data['avg_daily'], 0)
        self.assertEqual(data['scans_over_time'], [])
        self.assertEqual(data['recent_scans'], [])

    def test_with_history(self):
        for _ in range(12):
            QRScan.objects.create(qr=self.qr)

        data = get_qr_analytics(self.qr)

        self.assertEqual(data['type'], 'url')
        self.assertEqual(data['avg_daily'], 4)
        self.assertEqual(len(data['recent_scans']), 10)
        self.assertEqual(sum(row['scans'] for row in data['scans_over_time']), 12)
        self.assertEqual(data['created_weekday'], timezone.localtime(self.qr.created_at).strftime('%A'))

    def test_avg_daily_rounds_half_up(self):
        """5 scans over 2 days is 3 per day."""
        QRCode.objects.filter(pk=self.qr.pk).update(scans=5, created_at=timezone.now() - timedelta(hours=36))
        self.qr.refresh_from_db()
        QRScan.objects.create(qr=self.qr)

        self.assertEqual(get_qr_analytics(self.qr)['avg_daily'], 3)


class DashboardViewTests(TestCase):
    """Tests for dashboard endpoints."""

    def setUp(self):
        self.user = User.objects.create_user(email='owner@example.com', password='pass123')
        self.other = User.objects.create_user(email='other@example.com', password='pass123')
        self.qr = QRCode.objects.create(title='Mine', type='text', content='x', scans=2, owner=self.user)
        self.foreign = QRCode.objects.create(title='Theirs', type='text', content='y', scans=50, owner=self.other)
        QRScan.objects.create(qr=self.qr)
        QRScan.objects.create(qr=self.foreign)

    def test_requires_login(self):
        response = self.client.get(reverse('dashboard:index'))

        self.assertEqual(response.status_code, 302)
        self.assertIn('/accounts/login/', response.url)

    def test_index_is_scoped_to_owner(self):
        self.client.login(email='owner@example.com', password='pass123')
        response = self.client.get(reverse('dashboard:index'))

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['period'], 'last_30_days')
        self.assertEqual(data['stats']['total_qrs'], 1)
        self.assertEqual(data['stats']['total_scans'], 2)
        self.assertEqual(data['stats']['recent_activity'], 1)
        self.assertEqual([row['title'] for row in data['charts']['top_performing']], ['Mine'])

    def test_index_period_all(self):
        self.client.login(email='owner@example.com', password='pass123')
        data = self.client.get(reverse('dashboard:index'), {'period': 'all'}).json()

        self.assertEqual(data['period'], 'all')
        self.assertEqual(data['range'], {'start': None, 'end': None})

    def test_index_custom_period(self):
        self.client.login(email='owner@example.com', password='pass123')
        data = self.client.get(reverse('dashboard:index'), {
            'period': 'custom',
            'date_from': '2020-01-01',
            'date_to': '2020-01-31',
        }).json()

        self.assertIsNotNone(data['range']['end'])
        self.assertEqual(data['stats']['recent_activity'], 0)

    def test_qr_analytics(self):
        self.client.login(email='owner@example.com', password='pass123')

        response = self.client.get(reverse('dashboard:qr_analytics', args=[self.qr.id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['qr']['id'], self.qr.id)

        response = self.client.get(reverse('dashboard:qr_analytics', args=[self.foreign.id]))
        self.assertEqual(response.status_code, 404)
