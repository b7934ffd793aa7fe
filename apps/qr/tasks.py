"""Celery tasks for QR codes."""

import logging

from celery import shared_task

from .services import purge_orphan_scans

logger = logging.getLogger(__name__)


@shared_task
def purge_orphan_scans_task():
    """
    Delete scans recorded against identifiers with no QR code.

    Scheduled daily via Celery Beat.
    """
    count = purge_orphan_scans()
    logger.info(f'Orphan scan cleanup removed {count} scans')
    return count
