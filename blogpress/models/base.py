"""
Soft-delete plumbing shared by blogpress models.
"""
from collections import namedtuple

from django.conf import settings
from django.db import models
from django.utils import timezone

Deletion = namedtuple("Deletion", ["at", "by"])


def user_pk(user):
    """Return the primary key of an authenticated user, else None."""
    if user is None or not user.is_authenticated:
        return None
    return user.pk


class SoftDeleteQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_deleted=False)

    def deleted(self):
        return self.filter(is_deleted=True)


class SoftDeleteModel(models.Model):
    """
    Abstract base for rows that are flagged instead of removed.

    The flag, timestamp and actor travel together and are read back as a
    single ``deletion`` record, which is ``None`` while the row is live.
    """

    DELETION_FIELDS = ["is_deleted", "deleted_at", "deleted_by"]

    is_deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        abstract = True

    @property
    def deletion(self):
        if not self.is_deleted:
            return None
        return Deletion(at=self.deleted_at, by=self.deleted_by)

    def soft_delete(self, actor=None):
        """Flag the row as deleted by ``actor``."""
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.deleted_by = actor
        self.save(update_fields=self.DELETION_FIELDS)

    def restore(self):
        """Clear the deletion record."""
        self.is_deleted = False
        self.deleted_at = None
        self.deleted_by = None
        self.save(update_fields=self.DELETION_FIELDS)
