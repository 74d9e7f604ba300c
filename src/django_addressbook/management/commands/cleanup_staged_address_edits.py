"""Management command to clean up expired staged address edits."""

import logging

from django.core.management.base import BaseCommand
from django.utils import timezone

from django_addressbook.models import StagedAddressEdit
from django_addressbook.services import purge_expired_staged_edits

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Delete staged shared-address edits that were never confirmed and have expired'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show count of edits that would be deleted without actually deleting'
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options['dry_run']:
            count = StagedAddressEdit.objects.filter(expires_at__lte=now).count()
            self.stdout.write(f'Would delete {count} expired staged address edits')
            return

        deleted = purge_expired_staged_edits(now=now)
        logger.info("Purged %s expired staged address edits", deleted)
        self.stdout.write(
            self.style.SUCCESS(f'Deleted {deleted} expired staged address edits')
        )
