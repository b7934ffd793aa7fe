"""
Scan tracking: record a scan, bump the counter, redirect to the destination.

The sequence is linear and never retried:

    1. identifier missing          -> 400
    2. add scan record             -> 500 on failure
    3. increment counter (atomic)  -> 500 on failure
    4. read record                 -> 404 if missing
    5. read destination            -> 404 if empty
    6. 307 to the destination

Steps 2-4 are not wrapped in a transaction. If step 3 fails after step 2
succeeded, the scan stays recorded and the counter under-counts it.
"""
import logging

from django.http import (
    HttpResponse,
    HttpResponseBadRequest,
    HttpResponseNotFound,
    HttpResponseServerError,
)
from django.http.response import HttpResponseRedirectBase

from .store import ScanStore, StoreError

logger = logging.getLogger(__name__)

MISSING_ID_MESSAGE = 'QR Code ID is missing'
QR_NOT_FOUND_MESSAGE = 'QR Code not found'
DESTINATION_NOT_FOUND_MESSAGE = 'Destination URL not found'
INTERNAL_ERROR_MESSAGE = 'An internal error occurred'


class HttpResponseTemporaryRedirect(HttpResponseRedirectBase):
    status_code = 307


class ScanTracker:
    """
    Handles one scan of a QR code against an injected store.

    Args:
        store: ScanStore implementation
        error_redirect_url: when set, backend failures redirect here (307)
            instead of answering 500. 400 and 404 answers are unaffected.
    """

    def __init__(self, store: ScanStore, error_redirect_url: str | None = None):
        self.store = store
        self.error_redirect_url = error_redirect_url

    def track(self, qr_id: str | None) -> HttpResponse:
        qr_id = (qr_id or '').strip()
        if not qr_id:
            logger.error('QR Code ID is missing from the URL')
            return _text(HttpResponseBadRequest, MISSING_ID_MESSAGE)

        logger.info(f'[BEGIN] Processing scan for QR ID: {qr_id}')

        try:
            self.store.add_scan_record(qr_id)
            logger.debug(f'Added scan record for {qr_id}')

            self.store.increment_scan_counter(qr_id, 1)
            logger.debug(f'Incremented scan counter for {qr_id}')

            qr = self.store.get_record(qr_id)
            if qr is None:
                logger.warning(f'QR Code not found after update for ID: {qr_id}')
                return _text(HttpResponseNotFound, QR_NOT_FOUND_MESSAGE)

            destination_url = qr.destination_url
            if not destination_url:
                logger.warning(f'Destination URL not found for QR ID: {qr_id}')
                return _text(HttpResponseNotFound, DESTINATION_NOT_FOUND_MESSAGE)

            response = HttpResponseTemporaryRedirect(destination_url)
        except StoreError:
            logger.exception(f'Store failure during scan tracking for {qr_id}')
            return self._error_response()
        except Exception:
            logger.exception(f'[CRITICAL ERROR] Failed during scan tracking for {qr_id}')
            return self._error_response()

        logger.info(f'[END] Redirecting {qr_id} to {destination_url}')
        return response

    def _error_response(self) -> HttpResponse:
        if self.error_redirect_url:
            return HttpResponseTemporaryRedirect(self.error_redirect_url)
        return _text(HttpResponseServerError, INTERNAL_ERROR_MESSAGE)


def _text(response_class, message: str) -> HttpResponse:
    return response_class(message, content_type='text/plain; charset=utf-8')
