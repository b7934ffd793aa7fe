from django.conf import settings
from django.views import View

from .store import get_default_store
from .tracking import ScanTracker


class TrackView(View):
    """Public scan endpoint: records the scan and redirects to the destination"""

    # Injected per URL pattern or test via TrackView.as_view(store=...)
    store = None
    http_method_names = ['get', 'head']

    def get(self, request, qr_id=''):
        tracker = ScanTracker(
            self.store or get_default_store(),
            error_redirect_url=getattr(settings, 'QR_TRACKING_ERROR_REDIRECT_URL', None),
        )
        return tracker.track(qr_id)
