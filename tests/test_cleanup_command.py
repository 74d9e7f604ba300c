"""Tests for cleanup_staged_address_edits management command."""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from django_addressbook.models import Contact, StagedAddressEdit


def make_staged(contact, session_key, expires_in):
    return StagedAddressEdit.objects.create(
        session_key=session_key,
        contact=contact,
        payload={'city': 'Shelbyville'},
        expires_at=timezone.now() + expires_in,
    )


@pytest.mark.django_db
class TestCleanupStagedAddressEditsCommand:
    """Test suite for cleanup_staged_address_edits command."""

    def test_cleanup_deletes_expired_edits(self):
        """Command should delete staged edits past their expiry."""
        john = Contact.objects.create(first_name='John', last_name='Smith')
        expired = make_staged(john, 'expired', timedelta(minutes=-5))
        pending = make_staged(john, 'pending', timedelta(minutes=5))

        out = StringIO()
        call_command('cleanup_staged_address_edits', stdout=out)

        assert not StagedAddressEdit.objects.filter(pk=expired.pk).exists()
        assert StagedAddressEdit.objects.filter(pk=pending.pk).exists()
        assert 'Deleted 1 expired staged address edits' in out.getvalue()

    def test_dry_run_does_not_delete(self):
        """--dry-run should show count without deleting."""
        john = Contact.objects.create(first_name='John', last_name='Smith')
        expired = make_staged(john, 'expired', timedelta(minutes=-5))

        out = StringIO()
        call_command('cleanup_staged_address_edits', '--dry-run', stdout=out)

        assert StagedAddressEdit.objects.filter(pk=expired.pk).exists()
        assert 'Would delete 1 expired staged address edits' in out.getvalue()

    def test_nothing_to_delete(self):
        out = StringIO()
        call_command('cleanup_staged_address_edits', stdout=out)

        assert 'Deleted 0 expired staged address edits' in out.getvalue()
