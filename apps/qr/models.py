import secrets
import string
from django.conf import settings
from django.db import models

QR_ID_LENGTH = 20


def generate_qr_id():
    """Generate an opaque 20-character identifier for a QR code"""
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(QR_ID_LENGTH))


class QRCode(models.Model):
    """A generated QR code. URL codes are dynamic and redirect through tracking."""

    class Type(models.TextChoices):
        URL = 'url', 'Website URL (Trackable)'
        TEXT = 'text', 'Plain Text'
        EMAIL = 'email', 'Email'
        PHONE = 'phone', 'Phone Number'
        SMS = 'sms', 'SMS Message'
        WIFI = 'wifi', 'WiFi Network'

    id = models.CharField(
        primary_key=True,
        max_length=QR_ID_LENGTH,
        default=generate_qr_id,
        editable=False
    )
    title = models.CharField('Title', max_length=200)
    type = models.CharField('Type', max_length=10, choices=Type.choices, default=Type.URL)
    content = models.TextField('Content', help_text='Payload the user asked to encode')
    destination_url = models.CharField(
        'Destination URL',
        max_length=2048,
        blank=True,
        help_text='Where a scan of a dynamic code is redirected'
    )

    # Rendered PNG as a data: URL
    image = models.TextField('Image', blank=True)

    # Statistics
    scans = models.PositiveIntegerField('Scans', default=0)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='qr_codes',
        verbose_name='Owner',
        blank=True,
        null=True
    )
    created_at = models.DateTimeField('Created', auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField('Updated', blank=True, null=True)

    class Meta:
        verbose_name = 'QR code'
        verbose_name_plural = 'QR codes'
        ordering = ['-created_at']

    def __str__(self):
        return f'{self.title} ({self.type})'

    @property
    def is_dynamic(self):
        return self.type == self.Type.URL

    def get_tracking_url(self):
        """Public URL a dynamic code encodes"""
        base_url = getattr(settings, 'QR_TRACKING_BASE_URL', 'http://localhost:8000/t')
        return f"{base_url.rstrip('/')}/{self.id}"

    def get_encoded_payload(self):
        """What is physically encoded in the image"""
        if self.is_dynamic:
            return self.get_tracking_url()
        return self.content


class QRScan(models.Model):
    """One recorded scan of a QR code"""

    id = models.BigAutoField(primary_key=True)
    # No DB constraint: a scan may be written before the parent is known to exist
    qr = models.ForeignKey(
        QRCode,
        on_delete=models.CASCADE,
        related_name='scan_logs',
        verbose_name='QR code',
        db_constraint=False
    )
    scanned_at = models.DateTimeField('Time', auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = 'Scan'
        verbose_name_plural = 'Scans'
        ordering = ['-scanned_at']

    def __str__(self):
        return f'{self.qr_id} @ {self.scanned_at}'
