"""Abstract base models for the address book.

- TimeStampedModel: created_at/updated_at
- ArchivableModel: soft delete through archived_at, hidden by the default manager
"""
from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    """Abstract base model with created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ArchivableQuerySet(models.QuerySet):

    def active(self):
        return self.filter(archived_at__isnull=True)

    def archived(self):
        return self.filter(archived_at__isnull=False)


class ArchivableManager(models.Manager.from_queryset(ArchivableQuerySet)):
    """Manager that hides archived rows.

    Use .with_archived() to include them.
    """

    def get_queryset(self):
        return super().get_queryset().active()

    def with_archived(self):
        return super().get_queryset()


class ArchivableModel(TimeStampedModel):
    """Abstract base model that can be archived instead of deleted.

    Attributes:
        archived_at: When the row was archived, None if active
        objects: Manager that excludes archived rows
        all_objects: Manager that includes all rows
    """

    archived_at = models.DateTimeField(null=True, blank=True)

    objects = ArchivableManager()
    all_objects = models.Manager()

    class Meta:
        abstract = True

    def archive(self):
        """Mark the row archived without deleting it."""
        self.archived_at = timezone.now()
        self.save(update_fields=['archived_at', 'updated_at'])

    def restore(self):
        self.archived_at = None
        self.save(update_fields=['archived_at', 'updated_at'])

    @property
    def is_archived(self):
        return self.archived_at is not None
