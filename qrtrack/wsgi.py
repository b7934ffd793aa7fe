"""WSGI config for qrtrack project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'qrtrack.settings')

application = get_wsgi_application()
