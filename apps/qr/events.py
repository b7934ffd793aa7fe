"""Usage events (generation, download, copy) written to the log."""

import logging

logger = logging.getLogger(__name__)

QR_CODE_GENERATED = 'qr_code_generated'
QR_CODE_DOWNLOADED = 'qr_code_downloaded'
QR_CODE_COPIED = 'qr_code_copied'


def track_event(name: str, qr) -> None:
    logger.info(
        f'{name} qr_id={qr.id} qr_type={qr.type} qr_title={qr.title!r}',
        extra={'event': name, 'qr_id': qr.id, 'qr_type': qr.type},
    )
