"""
Rate limiting middleware for login/signup bot protection.
Simple in-memory implementation without external dependencies.

QR tracking paths are public and never limited.
"""
import time
from threading import Lock
from django.conf import settings
from django.http import HttpResponse


class LoginRateLimitMiddleware:
    """
    Rate limiting by IP address.

    Settings (in settings.py):
        RATE_LIMIT_REQUESTS = 5  # max requests
        RATE_LIMIT_WINDOW = 60   # per N seconds
        RATE_LIMIT_PATHS = ['/accounts/login/', '/accounts/signup/']
        RATE_LIMIT_TRUST_FORWARDED = False  # True only behind a proxy that sets X-Forwarded-For
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.requests = {}
        self.lock = Lock()

    def __call__(self, request):
        max_requests = getattr(settings, 'RATE_LIMIT_REQUESTS', 5)
        window = getattr(settings, 'RATE_LIMIT_WINDOW', 60)
        protected_paths = getattr(settings, 'RATE_LIMIT_PATHS', [
            '/accounts/login/',
            '/accounts/signup/',
        ])

        # Only check POST requests to protected paths
        if request.method == 'POST' and request.path in protected_paths:
            ip = self._get_client_ip(request)

            if self._is_rate_limited(ip, max_requests, window):
                return HttpResponse(
                    'Too many requests. Please wait a minute and try again.',
                    status=429,
                    content_type='text/plain',
                )

        return self.get_response(request)

    def _get_client_ip(self, request):
        """Client IP. X-Forwarded-For is client controlled unless a proxy rewrites it."""
        if getattr(settings, 'RATE_LIMIT_TRUST_FORWARDED', False):
            x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
            if x_forwarded_for:
                return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '0.0.0.0')

    def _is_rate_limited(self, ip, max_requests, window):
        """Check if IP exceeded rate limit, recording the attempt if not."""
        now = time.time()

        with self.lock:
            self._prune(now, window)

            recent = self.requests.get(ip, [])
            if len(recent) >= max_requests:
                return True

            recent.append(now)
            self.requests[ip] = recent
            return False

    def _prune(self, now, window):
        """Drop requests outside the window and forget IPs with none left."""
        for ip in list(self.requests):
            recent = [req_time for req_time in self.requests[ip] if now - req_time < window]
            if recent:
                self.requests[ip] = recent
            else:
                del self.requests[ip]
