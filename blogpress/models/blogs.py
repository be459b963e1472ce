"""
Blog post model and its category links for blogpress.
"""
from django.conf import settings
from django.db import models
from django.db.models import Count, Exists, OuterRef, Q, Value
from django.urls import reverse
from django.utils import timezone

from ..text import estimate_read_time, slugify
from .base import SoftDeleteModel, SoftDeleteQuerySet, user_pk
from .categories import Category
from .comments import Like


class BlogSort(models.TextChoices):
    LATEST = "latest", "Latest"
    MOST_LIKED = "most_liked", "Most liked"
    MOST_VIEWED = "most_viewed", "Most viewed"
    MOST_DISCUSSED = "most_discussed", "Most discussed"


class BlogQuerySet(SoftDeleteQuerySet):
    def published(self):
        return self.filter(is_published=True)

    def visible_to(self, user):
        """Live posts that are published or written by ``user``."""
        qs = self.active()
        viewer_id = user_pk(user)
        if viewer_id is None:
            return qs.filter(is_published=True)
        return qs.filter(Q(is_published=True) | Q(author_id=viewer_id))

    def in_categories(self, category_ids):
        if not category_ids:
            return self
        links = BlogCategory.objects.filter(
            blog=OuterRef("pk"),
            category_id__in=category_ids,
        )
        return self.filter(Exists(links))

    def with_engagement(self, user):
        """Annotate ``comment_count`` and the viewer's ``is_liked`` flag."""
        qs = self.annotate(
            comment_count=Count("comments", filter=Q(comments__is_deleted=False)),
        )
        viewer_id = user_pk(user)
        if viewer_id is None:
            return qs.annotate(
                is_liked=Value(False, output_field=models.BooleanField()),
            )
        return qs.annotate(
            is_liked=Exists(Like.objects.filter(blog=OuterRef("pk"), user_id=viewer_id)),
        )

    def sorted_by(self, sort):
        if sort == BlogSort.MOST_LIKED:
            return self.order_by("-like_count", "-created_at", "-pk")
        if sort == BlogSort.MOST_VIEWED:
            return self.order_by("-view_count", "-created_at", "-pk")
        if sort == BlogSort.MOST_DISCUSSED:
            return self.order_by("-comment_count", "-created_at", "-pk")
        return self.order_by("-created_at", "-pk")


class Blog(SoftDeleteModel):
    """
    Blog post.

    Drafts are visible only to their author. ``published_at`` records the
    first publication and survives unpublishing. ``like_count`` mirrors the
    number of Like rows and is only ever changed by atomic updates.
    """

    # Content
    title = models.CharField(max_length=200)
    slug = models.CharField(max_length=100, db_index=True)
    content = models.TextField(max_length=10000)
    summary = models.CharField(max_length=300, blank=True)
    featured_image_url = models.URLField(max_length=500, blank=True)
    meta_description = models.CharField(max_length=160, blank=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogpress_blogs",
    )

    # Status
    is_published = models.BooleanField(default=False)

    # Engagement stats
    view_count = models.PositiveIntegerField(default=0)
    like_count = models.PositiveIntegerField(default=0)
    estimated_read_time = models.PositiveSmallIntegerField(default=1)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(null=True, blank=True)
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = BlogQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_deleted", "is_published", "-created_at"]),
            models.Index(fields=["author", "-created_at"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["slug"],
                condition=models.Q(is_deleted=False),
                name="blogpress_blog_unique_live_slug",
            ),
        ]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse("blogpress:blog_detail_slug", kwargs={"slug": self.slug})

    @classmethod
    def unique_slug(cls, title, exclude_pk=None):
        """
        Slug for ``title`` that no other live post uses.

        Collisions get a numeric suffix: ``base``, ``base-1``, ``base-2``...
        """
        base_slug = slugify(title)
        slug = base_slug
        counter = 1
        taken = cls.objects.active()
        if exclude_pk is not None:
            taken = taken.exclude(pk=exclude_pk)
        while taken.filter(slug=slug).exists():
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    def is_owned_by(self, user):
        viewer_id = user_pk(user)
        return viewer_id is not None and viewer_id == self.author_id

    def can_view(self, user):
        """Check if user has permission to view this post."""
        if self.is_deleted:
            return False
        return self.is_published or self.is_owned_by(user)

    def refresh_read_time(self):
        self.estimated_read_time = estimate_read_time(self.content)

    def mark_published(self):
        """
        Flip the post to published.

        Returns False when it already was. The publication timestamp is
        only set the first time.
        """
        if self.is_published:
            return False
        self.is_published = True
        if self.published_at is None:
            self.published_at = timezone.now()
        return True

    @property
    def category_list(self):
        """Categories linked to this post, by name."""
        cached = getattr(self, "_category_list", None)
        if cached is None:
            cached = list(
                Category.objects.filter(blog_links__blog_id=self.pk).order_by("name")
            )
            self._category_list = cached
        return cached

    @category_list.setter
    def category_list(self, categories):
        self._category_list = list(categories)

    def set_categories(self, categories):
        """Replace the post's category links."""
        BlogCategory.objects.filter(blog=self).delete()
        BlogCategory.objects.bulk_create(
            [BlogCategory(blog=self, category=category) for category in categories]
        )
        self.category_list = sorted(categories, key=lambda c: c.name)

    @property
    def preview(self):
        """Return summary, or truncated content for feed display."""
        if self.summary:
            return self.summary
        if len(self.content) > 280:
            return self.content[:280] + "..."
        return self.content


class BlogCategory(models.Model):
    """
    Join row linking a post to a category.

    Lookups in either direction go through explicit queries on this table.
    """

    blog = models.ForeignKey(
        Blog,
        on_delete=models.CASCADE,
        related_name="category_links",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="blog_links",
    )

    class Meta:
        verbose_name = "Blog Category"
        verbose_name_plural = "Blog Categories"
        constraints = [
            models.UniqueConstraint(
                fields=["blog", "category"],
                name="blogpress_blogcategory_unique_pair",
            ),
        ]

    def __str__(self):
        return f"{self.blog} - {self.category}"
