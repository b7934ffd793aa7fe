"""Management command to delete scans that belong to no QR code."""

from django.core.management.base import BaseCommand

from apps.qr.services import purge_orphan_scans


class Command(BaseCommand):
    """Delete orphan scan records."""

    help = 'Delete scans recorded against QR code ids that do not exist'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only count orphan scans, do not delete them',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        count = purge_orphan_scans(dry_run=dry_run)

        if dry_run:
            self.stdout.write(self.style.WARNING(f'{count} orphan scans would be deleted'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Deleted {count} orphan scans'))
