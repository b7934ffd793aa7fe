import apps.qr.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='QRCode',
            fields=[
                ('id', models.CharField(default=apps.qr.models.generate_qr_id, editable=False, max_length=20, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200, verbose_name='Title')),
                ('type', models.CharField(choices=[('url', 'Website URL (Trackable)'), ('text', 'Plain Text'), ('email', 'Email'), ('phone', 'Phone Number'), ('sms', 'SMS Message'), ('wifi', 'WiFi Network')], default='url', max_length=10, verbose_name='Type')),
                ('content', models.TextField(help_text='Payload the user asked to encode', verbose_name='Content')),
                ('destination_url', models.CharField(blank=True, help_text='Where a scan of a dynamic code is redirected', max_length=2048, verbose_name='Destination URL')),
                ('image', models.TextField(blank=True, verbose_name='Image')),
                ('scans', models.PositiveIntegerField(default=0, verbose_name='Scans')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created')),
                ('updated_at', models.DateTimeField(blank=True, null=True, verbose_name='Updated')),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='qr_codes', to=settings.AUTH_USER_MODEL, verbose_name='Owner')),
            ],
            options={
                'verbose_name': 'QR code',
                'verbose_name_plural': 'QR codes',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='QRScan',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('scanned_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Time')),
                ('qr', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.CASCADE, related_name='scan_logs', to='qr.qrcode', verbose_name='QR code')),
            ],
            options={
                'verbose_name': 'Scan',
                'verbose_name_plural': 'Scans',
                'ordering': ['-scanned_at'],
            },
        ),
    ]
