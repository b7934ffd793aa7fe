from django.contrib import admin
from .models import QRCode, QRScan


@admin.register(QRCode)
class QRCodeAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'type', 'owner', 'scans', 'created_at')
    list_filter = ('type',)
    search_fields = ('id', 'title', 'content', 'owner__email')
    readonly_fields = ('id', 'scans', 'created_at', 'updated_at')
    exclude = ('image',)


@admin.register(QRScan)
class QRScanAdmin(admin.ModelAdmin):
    # qr_id, not qr: scans may point at codes that never existed
    list_display = ('qr_id', 'scanned_at')
    search_fields = ('qr__id',)
    date_hierarchy = 'scanned_at'
