"""Tests for the owner JSON API."""

import json

from django.test import TestCase
from django.urls import reverse

from apps.accounts.models import User
from apps.qr.models import QRCode, QRScan


class QRApiTests(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='owner@example.com', password='pass12345')
        self.other = User.objects.create_user(email='other@example.com', password='pass12345')
        self.client.force_login(self.user)

        self.qr = QRCode.objects.create(
            title='Landing',
            type=QRCode.Type.URL,
            content='https://example.com',
            destination_url='https://example.com',
            owner=self.user,
        )
        self.foreign = QRCode.objects.create(
            title='Not mine',
            type=QRCode.Type.TEXT,
            content='hello',
            owner=self.other,
        )

    def _post(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def test_login_required(self):
        self.client.logout()
        response = self.client.get(reverse('qr_api:list'))

        self.assertEqual(response.status_code, 302)
        self.assertIn('/accounts/login/', response['Location'])

    def test_list_only_own_codes(self):
        response = self.client.get(reverse('qr_api:list'))

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['count'], 1)
        self.assertEqual(data['results'][0]['id'], self.qr.id)
        self.assertEqual(data['types'], ['url'])

    def test_list_filters(self):
        QRCode.objects.create(title='Wifi', type='wifi', content='WIFI:T:WPA;S:x;P:y;;', owner=self.user)

        data = self.client.get(reverse('qr_api:list'), {'type': 'wifi'}).json()
        self.assertEqual([r['title'] for r in data['results']], ['Wifi'])

        data = self.client.get(reverse('qr_api:list'), {'search': 'land'}).json()
        self.assertEqual([r['title'] for r in data['results']], ['Landing'])

    def test_create_url_code(self):
        response = self._post(reverse('qr_api:list'), {
            'type': 'url',
            'title': 'Promo',
            'url': 'https://promo.example.com',
        })

        self.assertEqual(response.status_code, 201)
        data = response.json()
        qr = QRCode.objects.get(pk=data['id'])
        self.assertEqual(qr.owner, self.user)
        self.assertEqual(qr.destination_url, 'https://promo.example.com')
        self.assertTrue(data['is_dynamic'])
        self.assertTrue(data['tracking_url'].endswith(f'/{qr.id}'))
        self.assertTrue(data['image'].startswith('data:image/png;base64,'))

    def test_create_wifi_code(self):
        response = self._post(reverse('qr_api:list'), {
            'type': 'wifi',
            'wifi_name': 'Home',
            'wifi_password': 'secret',
            'wifi_security': 'WEP',
        })

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['content'], 'WIFI:T:WEP;S:Home;P:secret;;')
        self.assertEqual(data['title'], 'WIFI QR Code')
        self.assertIsNone(data['tracking_url'])

    def test_create_rejects_bad_input(self):
        response = self._post(reverse('qr_api:list'), {'type': 'url', 'url': 'not-a-url'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

        response = self._post(reverse('qr_api:list'), {'type': 'fax', 'text': 'x'})
        self.assertEqual(response.status_code, 400)

        response = self.client.post(reverse('qr_api:list'), data='{oops', content_type='application/json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Invalid JSON')

        self.assertEqual(QRCode.objects.filter(owner=self.user).count(), 1)

    def test_create_rejects_non_string_type(self):
        for qr_type in (['url'], {'kind': 'url'}, 7, None):
            response = self._post(reverse('qr_api:list'), {'type': qr_type, 'url': 'https://x.io'})

            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()['error'], 'Unknown QR code type')

        self.assertEqual(QRCode.objects.filter(owner=self.user).count(), 1)

    def test_detail(self):
        response = self.client.get(reverse('qr_api:detail', args=[self.qr.id]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['title'], 'Landing')

    def test_other_owner_code_is_404(self):
        for name in ('detail', 'scans', 'download'):
            response = self.client.get(reverse(f'qr_api:{name}', args=[self.foreign.id]))
            self.assertEqual(response.status_code, 404)

        response = self.client.post(reverse('qr_api:delete', args=[self.foreign.id]))
        self.assertEqual(response.status_code, 404)
        self.assertTrue(QRCode.objects.filter(pk=self.foreign.pk).exists())

    def test_update_destination(self):
        response = self._post(
            reverse('qr_api:destination', args=[self.qr.id]),
            {'destination_url': 'https://new.example.com'},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['destination_url'], 'https://new.example.com')
        self.qr.refresh_from_db()
        self.assertEqual(self.qr.content, 'https://new.example.com')

    def test_update_destination_invalid(self):
        response = self._post(
            reverse('qr_api:destination', args=[self.qr.id]),
            {'destination_url': 'javascript:alert(1)'},
        )

        self.assertEqual(response.status_code, 400)
        self.qr.refresh_from_db()
        self.assertEqual(self.qr.destination_url, 'https://example.com')

    def test_delete(self):
        QRScan.objects.create(qr=self.qr)

        response = self.client.post(reverse('qr_api:delete', args=[self.qr.id]))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(QRCode.objects.filter(pk=self.qr.pk).exists())
        self.assertFalse(QRScan.objects.exists())

    def test_delete_requires_post(self):
        response = self.client.get(reverse('qr_api:delete', args=[self.qr.id]))
        self.assertEqual(response.status_code, 405)

    def test_scans_paginated(self):
        for _ in range(12):
            QRScan.objects.create(qr=self.qr)

        data = self.client.get(reverse('qr_api:scans', args=[self.qr.id])).json()
        self.assertEqual(data['count'], 12)
        self.assertEqual(data['num_pages'], 2)
        self.assertEqual(len(data['results']), 10)
        self.assertEqual(
            set(data['results'][0]),
            {'id', 'timestamp', 'date', 'time', 'day_of_week'}
        )

        data = self.client.get(reverse('qr_api:scans', args=[self.qr.id]), {'page': 2}).json()
        self.assertEqual(len(data['results']), 2)

    def test_download_png(self):
        with self.assertLogs('apps.qr.events', level='INFO') as logs:
            response = self.client.get(reverse('qr_api:download', args=[self.qr.id]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'image/png')
        self.assertEqual(response['Content-Disposition'], 'attachment; filename="landing.png"')
        self.assertTrue(response.content.startswith(b'\x89PNG'))
        self.assertIn('qr_code_downloaded', logs.output[0])

    def test_copied_event(self):
        with self.assertLogs('apps.qr.events', level='INFO') as logs:
            response = self.client.post(reverse('qr_api:copied', args=[self.qr.id]))

        self.assertEqual(response.status_code, 200)
        self.assertIn('qr_code_copied', logs.output[0])
