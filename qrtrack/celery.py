"""Celery configuration for qrtrack project."""

import os
from celery import Celery
from celery.schedules import crontab

# Set default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'qrtrack.settings')

# Create Celery app
app = Celery('qrtrack')

# Load config from Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all registered Django apps
app.autodiscover_tasks()

# Periodic tasks (Celery Beat)
app.conf.beat_schedule = {
    'purge-orphan-scans-daily': {
        'task': 'apps.qr.tasks.purge_orphan_scans_task',
        'schedule': crontab(minute=30, hour=3),
    },
}
