"""Tests for site administration."""

from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from apps.accounts.models import User
from apps.qr.models import QRCode, QRScan
from .services import (
    AdminActionError,
    delete_user,
    get_overview_stats,
    search_qr_codes,
    search_users,
    toggle_admin,
)


class AdminServiceTests(TestCase):
    """Tests for administration services."""

    def setUp(self):
        self.admin = User.objects.create_superuser(email='admin@example.com', password='pass123')
        self.user = User.objects.create_user(
            email='jane@example.com',
            password='pass123',
            display_name='Jane Roe',
            phone_number='+15550001'
        )
        self.qr = QRCode.objects.create(
            title='Menu', type='url', content='https://menu.io', destination_url='https://menu.io',
            scans=4, owner=self.user
        )
        QRCode.objects.create(title='Wifi', type='wifi', content='WIFI:T:nopass;S:cafe;;', scans=1, owner=self.user)

    def test_overview_stats(self):
        User.objects.filter(pk=self.user.pk).update(last_login=timezone.now() - timedelta(days=1))
        User.objects.filter(pk=self.admin.pk).update(last_login=timezone.now() - timedelta(days=30))

        stats = get_overview_stats()

        self.assertEqual(stats['total_users'], 2)
        self.assertEqual(stats['total_qr_codes'], 2)
        self.assertEqual(stats['total_scans'], 5)
        self.assertEqual(stats['active_users'], 1)
        self.assertEqual(stats['admin_users'], 1)
        self.assertEqual(stats['avg_qrs_per_user'], 1)

    def test_avg_qrs_per_user_rounds_half_up(self):
        """5 codes over 2 users is 3 per user."""
        for i in range(3):
            QRCode.objects.create(title=f'Extra {i}', type='text', content='x', owner=self.admin)

        self.assertEqual(get_overview_stats()['avg_qrs_per_user'], 3)

    def test_search_users(self):
        for term in ('jane', 'Roe', '5550001'):
            self.assertEqual(list(search_users(term)), [self.user])
        self.assertEqual(search_users('').count(), 2)

    def test_search_qr_codes(self):
        self.assertEqual([qr.title for qr in search_qr_codes('menu')], ['Menu'])
        self.assertEqual([qr.title for qr in search_qr_codes('wifi')], ['Wifi'])
        self.assertEqual(search_qr_codes().count(), 2)

    def test_delete_user_cascades(self):
        QRScan.objects.create(qr=self.qr)

        count = delete_user(self.admin, self.user)

        self.assertEqual(count, 2)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())
        self.assertFalse(QRCode.objects.exists())
        self.assertFalse(QRScan.objects.exists())

    def test_cannot_delete_self(self):
        with self.assertRaises(AdminActionError):
            delete_user(self.admin, self.admin)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_toggle_admin(self):
        self.assertTrue(toggle_admin(self.admin, self.user))
        self.user.refresh_from_db()
        self.assertTrue(self.user.is_admin)

        self.assertFalse(toggle_admin(self.admin, self.user))
        self.user.refresh_from_db()
        self.assertFalse(self.user.is_admin)

    def test_cannot_revoke_own_admin(self):
        with self.assertRaises(AdminActionError):
            toggle_admin(self.admin, self.admin)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_staff)


class AdminViewTests(TestCase):
    """Tests for administration endpoints."""

    def setUp(self):
        self.admin = User.objects.create_superuser(email='admin@example.com', password='pass123')
        self.user = User.objects.create_user(email='user@example.com', password='pass123')
        self.qr = QRCode.objects.create(title='Menu', type='text', content='x', owner=self.user)

    def test_requires_login(self):
        response = self.client.get(reverse('administration:overview'))
        self.assertEqual(response.status_code, 302)

    def test_non_admin_forbidden(self):
        self.client.force_login(self.user)

        for name in ('overview', 'users', 'qr'):
            response = self.client.get(reverse(f'administration:{name}'))
            self.assertEqual(response.status_code, 403)

        response = self.client.post(reverse('administration:qr_delete', args=[self.qr.id]))
        self.assertEqual(response.status_code, 403)
        self.assertTrue(QRCode.objects.filter(pk=self.qr.pk).exists())

    def test_overview(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('administration:overview'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['stats']['total_users'], 2)

    def test_users_list(self):
        self.client.force_login(self.admin)
        data = self.client.get(reverse('administration:users'), {'search': 'user@'}).json()

        self.assertEqual([row['email'] for row in data['results']], ['user@example.com'])
        self.assertEqual(data['results'][0]['display_name'], 'user@example.com')

    def test_qr_list_includes_all_owners(self):
        QRCode.objects.create(title='Admin code', type='text', content='y', owner=self.admin)
        self.client.force_login(self.admin)

        data = self.client.get(reverse('administration:qr')).json()
        self.assertEqual(len(data['results']), 2)

    def test_user_delete(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse('administration:user_delete', args=[self.user.id]))

        self.assertEqual(response.json(), {'success': True, 'deleted_qr_codes': 1})
        self.assertFalse(QRCode.objects.exists())

    def test_user_delete_self_refused(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse('administration:user_delete', args=[self.admin.id]))

        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

    def test_toggle_admin(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse('administration:user_toggle_admin', args=[self.user.id]))

        self.assertEqual(response.json(), {'success': True, 'is_admin': True})

    def test_qr_delete_any_owner(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse('administration:qr_delete', args=[self.qr.id]))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(QRCode.objects.filter(pk=self.qr.pk).exists())
