"""
Category model for blogpress.
"""
from django.conf import settings
from django.db import models
from django.db.models.functions import Lower
from django.urls import reverse
from django.utils import timezone

from .base import SoftDeleteModel


class Category(SoftDeleteModel):
    """
    Topic tag attached to blog posts.

    Names are unique case-insensitively among live categories; a deleted
    category frees its name.
    """

    name = models.CharField(max_length=100)
    description = models.TextField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Categories"
        constraints = [
            models.UniqueConstraint(
                Lower("name"),
                condition=models.Q(is_deleted=False),
                name="blogpress_category_unique_live_name",
            ),
        ]

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse("blogpress:category_blogs", kwargs={"pk": self.pk})

    @property
    def post_count(self):
        """Return count of published, live posts in this category."""
        return self.blog_links.filter(
            blog__is_published=True,
            blog__is_deleted=False,
        ).count()
