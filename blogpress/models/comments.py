"""
Comment and Like models for blogpress.
"""
from django.conf import settings
from django.db import models, transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from .base import SoftDeleteModel


class Comment(SoftDeleteModel):
    """
    Reader comment on a post.

    Only the commenter may edit it; the commenter or the post's author may
    delete it.
    """

    blog = models.ForeignKey(
        "blogpress.Blog",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogpress_comments",
    )
    content = models.TextField(max_length=1000)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["blog", "is_deleted", "created_at"]),
        ]

    def __str__(self):
        return f"Comment by {self.user} on {self.blog}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content

    @property
    def is_edited(self):
        return self.updated_at is not None

    def edit(self, new_content):
        """Replace the comment text and stamp the edit time."""
        self.content = new_content
        self.updated_at = timezone.now()
        self.save(update_fields=["content", "updated_at"])


class Like(models.Model):
    """A reader's like on a post. One per (post, user)."""

    blog = models.ForeignKey(
        "blogpress.Blog",
        on_delete=models.CASCADE,
        related_name="likes",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogpress_likes",
    )
    liked_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-liked_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["blog", "user"],
                name="blogpress_like_unique_blog_user",
            ),
        ]

    def __str__(self):
        return f"{self.user} likes {self.blog}"

    @classmethod
    def toggle(cls, blog, user):
        """
        Toggle ``user``'s like on ``blog``.

        Adds the like if absent, removes it if present, and moves the post's
        ``like_count`` by one in the same transaction. The count never goes
        below zero. Callers should hold a row lock on the post.

        Returns True if the user now likes the post.
        """
        blog_model = type(blog)
        counter = blog_model.objects.filter(pk=blog.pk)

        with transaction.atomic():
            removed, _ = cls.objects.filter(blog=blog, user=user).delete()
            if removed:
                counter.update(like_count=Greatest(F("like_count") - 1, Value(0)))
                return False

            cls.objects.create(blog=blog, user=user)
            counter.update(like_count=F("like_count") + 1)
            return True
