"""Tests for QR payload encoding."""

from django.test import SimpleTestCase

from apps.qr.services import build_content


class BuildContentTests(SimpleTestCase):

    def test_url_is_kept(self):
        self.assertEqual(build_content('url', url=' https://example.com '), 'https://example.com')

    def test_text_is_kept_verbatim(self):
        self.assertEqual(build_content('text', text='Hello, world'), 'Hello, world')

    def test_email_with_subject_and_body(self):
        content = build_content(
            'email',
            email='contact@example.com',
            subject='Hi there',
            message='See you & bye',
        )
        self.assertEqual(
            content,
            'mailto:contact@example.com?subject=Hi%20there&body=See%20you%20%26%20bye'
        )

    def test_email_body_without_subject(self):
        """Body alone still starts the query with '?'."""
        content = build_content('email', email='a@b.co', message='hello')
        self.assertEqual(content, 'mailto:a@b.co?body=hello')

    def test_email_only_address(self):
        self.assertEqual(build_content('email', email='a@b.co'), 'mailto:a@b.co')

    def test_phone(self):
        self.assertEqual(build_content('phone', phone='+1234567890'), 'tel:+1234567890')

    def test_sms_with_and_without_message(self):
        self.assertEqual(build_content('sms', phone='+123'), 'sms:+123')
        self.assertEqual(build_content('sms', phone='+123', message='hi you'), 'sms:+123?body=hi%20you')

    def test_wifi_default_security(self):
        content = build_content('wifi', wifi_name='Home', wifi_password='secret')
        self.assertEqual(content, 'WIFI:T:WPA;S:Home;P:secret;;')

    def test_wifi_escapes_reserved_characters(self):
        content = build_content('wifi', wifi_name='My;Net', wifi_password='a:b,c"d\\e')
        self.assertEqual(content, 'WIFI:T:WPA;S:My\\;Net;P:a\\:b\\,c\\"d\\\\e;;')

    def test_wifi_open_network_has_no_password(self):
        content = build_content('wifi', wifi_name='Cafe', wifi_password='ignored', wifi_security='nopass')
        self.assertEqual(content, 'WIFI:T:nopass;S:Cafe;;')

    def test_wifi_unknown_security(self):
        with self.assertRaises(ValueError):
            build_content('wifi', wifi_name='x', wifi_security='WPA3-ENTERPRISE')

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            build_content('vcard', text='x')

    def test_extra_fields_are_ignored(self):
        self.assertEqual(build_content('phone', phone='123', url='https://x.io'), 'tel:123')
