"""Tests for accounts app including bot protection."""

from allauth.account.signals import user_signed_up
from django.http import HttpResponse
from django.test import Client, RequestFactory, TestCase, override_settings

from .middleware import LoginRateLimitMiddleware
from .models import User


class UserModelTests(TestCase):
    """Tests for the email-based user model."""

    def test_create_user(self):
        user = User.objects.create_user(email='Jane@EXAMPLE.com', password='pass123')

        self.assertEqual(user.email, 'Jane@example.com')
        self.assertTrue(user.check_password('pass123'))
        self.assertFalse(user.is_admin)
        self.assertTrue(user.is_active)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='pass123')

    def test_create_superuser_is_admin(self):
        user = User.objects.create_superuser(email='root@example.com', password='pass123')

        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_superuser)

    def test_display_name_falls_back_to_email(self):
        user = User.objects.create_user(email='jane@example.com')
        self.assertEqual(user.get_display_name(), 'jane@example.com')

        user.display_name = 'Jane'
        self.assertEqual(user.get_display_name(), 'Jane')
        self.assertEqual(str(user), 'jane@example.com')


class SignupTests(TestCase):
    """Tests for signup handling."""

    def test_signal_fills_display_name(self):
        user = User.objects.create_user(email='new.person@example.com', password='pass123')

        with self.assertLogs('apps.accounts.signals', level='INFO'):
            user_signed_up.send(sender=User, request=None, user=user)

        user.refresh_from_db()
        self.assertEqual(user.display_name, 'new.person')

    def test_signal_keeps_existing_display_name(self):
        user = User.objects.create_user(email='a@example.com', display_name='Alice')

        user_signed_up.send(sender=User, request=None, user=user)

        user.refresh_from_db()
        self.assertEqual(user.display_name, 'Alice')

    def test_signup_through_allauth(self):
        """Email signup creates the user and logs them in."""
        response = self.client.post('/accounts/signup/', {
            'email': 'fresh@example.com',
            'password1': 'Unusual-pass-4821',
            'password2': 'Unusual-pass-4821',
        })

        self.assertEqual(response.status_code, 302)
        user = User.objects.get(email='fresh@example.com')
        self.assertEqual(user.display_name, 'fresh')

    def test_login_with_email(self):
        User.objects.create_user(email='login@example.com', password='Unusual-pass-4821')

        response = self.client.post('/accounts/login/', {
            'login': 'login@example.com',
            'password': 'Unusual-pass-4821',
        })

        self.assertEqual(response.status_code, 302)
        self.assertIn('_auth_user_id', self.client.session)


@override_settings(
    RATE_LIMIT_REQUESTS=3,
    RATE_LIMIT_WINDOW=60,
    RATE_LIMIT_PATHS=['/accounts/login/', '/accounts/signup/'],
)
class RateLimitingTests(TestCase):
    """Tests for rate limiting middleware."""

    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = LoginRateLimitMiddleware(lambda request: HttpResponse('ok'))

    def test_rate_limit_blocks_after_threshold(self):
        """Should block requests after exceeding rate limit."""
        for _ in range(3):
            response = self.middleware(self.factory.post('/accounts/login/'))
            self.assertEqual(response.status_code, 200)

        response = self.middleware(self.factory.post('/accounts/login/'))

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response['Content-Type'], 'text/plain')
        self.assertEqual(
            response.content.decode(),
            'Too many requests. Please wait a minute and try again.'
        )

    def test_rate_limit_allows_get_requests(self):
        """GET requests should not be rate limited."""
        for _ in range(10):
            response = self.middleware(self.factory.get('/accounts/login/'))
            self.assertEqual(response.status_code, 200)

    def test_tracking_paths_never_limited(self):
        for _ in range(10):
            response = self.middleware(self.factory.get('/t/abc123'))
            self.assertEqual(response.status_code, 200)
            response = self.middleware(self.factory.post('/api/track/abc123'))
            self.assertEqual(response.status_code, 200)

    def test_rate_limit_per_ip(self):
        """Rate limit should be per IP address."""
        for _ in range(4):
            self.middleware(self.factory.post('/accounts/signup/', REMOTE_ADDR='1.1.1.1'))

        response = self.middleware(self.factory.post('/accounts/signup/', REMOTE_ADDR='2.2.2.2'))
        self.assertEqual(response.status_code, 200)

    def test_window_expiry(self):
        """Requests older than the window no longer count."""
        with override_settings(RATE_LIMIT_WINDOW=0):
            for _ in range(5):
                response = self.middleware(self.factory.post('/accounts/login/'))
                self.assertEqual(response.status_code, 200)

    @override_settings(RATE_LIMIT_TRUST_FORWARDED=False)
    def test_rotating_forwarded_header_does_not_bypass_limit(self):
        responses = [
            self.middleware(self.factory.post('/accounts/login/', HTTP_X_FORWARDED_FOR=f'10.1.{i}.1'))
            for i in range(20)
        ]

        self.assertEqual([r.status_code for r in responses[:3]], [200, 200, 200])
        self.assertTrue(all(r.status_code == 429 for r in responses[3:]))
        self.assertEqual(len(self.middleware.requests), 1)

    def test_expired_ips_are_forgotten(self):
        """IPs whose window emptied do not stay in memory."""
        with override_settings(RATE_LIMIT_WINDOW=0):
            for i in range(50):
                self.middleware(self.factory.post('/accounts/login/', REMOTE_ADDR=f'10.2.0.{i}'))

        self.assertLessEqual(len(self.middleware.requests), 1)

    def test_full_stack_returns_429(self):
        client = Client(REMOTE_ADDR='3.3.3.3')
        for _ in range(3):
            client.post('/accounts/login/', {'login': 'x@example.com', 'password': 'wrong'})

        response = client.post('/accounts/login/', {'login': 'x@example.com', 'password': 'wrong'})
        self.assertEqual(response.status_code, 429)


class MiddlewareTests(TestCase):
    """Tests for rate limit middleware functionality."""

    def setUp(self):
        self.middleware = LoginRateLimitMiddleware(lambda r: None)

    @override_settings(RATE_LIMIT_TRUST_FORWARDED=True)
    def test_middleware_extracts_ip_from_x_forwarded_for(self):
        """Behind a trusted proxy the first X-Forwarded-For entry is the client."""

        class MockRequest:
            META = {'HTTP_X_FORWARDED_FOR': '1.2.3.4, 5.6.7.8', 'REMOTE_ADDR': '10.0.0.1'}

        self.assertEqual(self.middleware._get_client_ip(MockRequest()), '1.2.3.4')

    @override_settings(RATE_LIMIT_TRUST_FORWARDED=False)
    def test_middleware_ignores_x_forwarded_for_by_default(self):
        """Without a trusted proxy the header is client controlled and ignored."""

        class MockRequest:
            META = {'HTTP_X_FORWARDED_FOR': '1.2.3.4', 'REMOTE_ADDR': '10.0.0.1'}

        self.assertEqual(self.middleware._get_client_ip(MockRequest()), '10.0.0.1')

    def test_middleware_extracts_ip_from_remote_addr(self):
        """Middleware should fall back to REMOTE_ADDR."""

        class MockRequest:
            META = {'REMOTE_ADDR': '9.9.9.9'}

        self.assertEqual(self.middleware._get_client_ip(MockRequest()), '9.9.9.9')

    def test_middleware_handles_missing_ip(self):
        """Middleware should handle missing IP gracefully."""

        class MockRequest:
            META = {}

        self.assertEqual(self.middleware._get_client_ip(MockRequest()), '0.0.0.0')
