"""
Blog post lifecycle and visibility rules.
"""
import logging
from collections import defaultdict

from django.db import transaction
from django.db.models import Exists, F, OuterRef, Q
from django.db.models.functions import Coalesce
from django.utils import timezone

from ..conf import blog_settings
from ..exceptions import NotFound, ValidationFailed
from ..forms import BlogForm
from ..models import Blog, BlogCategory, BlogSort, user_pk
from .comments import CommentService
from .images import get_image_storage
from .likes import LikeService

logger = logging.getLogger(__name__)

# view_count and like_count only change through F() updates.
EDITABLE_FIELDS = [
    "slug",
    "title",
    "content",
    "summary",
    "featured_image_url",
    "meta_description",
    "estimated_read_time",
    "is_published",
    "published_at",
    "updated_at",
]


class BlogService:
    """
    Owns the Blog aggregate: its fields, slug, categories and status.

    Likes and comments are handled by the injected engagement services;
    this service only reads through them.

    Args:
        likes: LikeService instance.
        comments: CommentService instance.
        images: image storage with ``upload_file(file)``; resolved lazily
            from settings when an image is first uploaded.
    """

    def __init__(self, likes=None, comments=None, images=None):
        self.likes = likes or LikeService()
        self.comments = comments or CommentService()
        self._images = images

    @property
    def images(self):
        if self._images is None:
            self._images = get_image_storage()
        return self._images

    # Reads

    def get_by_id(self, blog_id, viewer=None):
        """
        A post as ``viewer`` may see it, or None.

        Drafts resolve only for their author. The author also receives the
        comment and like lists on ``visible_comments`` / ``visible_likes``.
        """
        return self._detail(Blog.objects.filter(pk=blog_id), viewer)

    def get_by_slug(self, slug, viewer=None):
        return self._detail(Blog.objects.filter(slug=slug), viewer)

    def exists(self, blog_id):
        return Blog.objects.active().filter(pk=blog_id).exists()

    def is_owner(self, blog_id, user):
        viewer_id = user_pk(user)
        if viewer_id is None:
            return False
        return Blog.objects.active().filter(pk=blog_id, author_id=viewer_id).exists()

    def get_all(self, viewer=None, category_ids=None, sort=BlogSort.LATEST):
        return self._listing(Blog.objects.all(), viewer, category_ids, sort)

    def by_author(self, author, viewer=None, category_ids=None, sort=BlogSort.LATEST):
        qs = Blog.objects.filter(author_id=user_pk(author))
        return self._listing(qs, viewer, category_ids, sort)

    def by_category(self, category_id, viewer=None, category_ids=None, sort=BlogSort.LATEST):
        qs = Blog.objects.in_categories([category_id])
        return self._listing(qs, viewer, category_ids, sort)

    def search(self, term, viewer=None, category_ids=None, sort=BlogSort.LATEST):
        """
        Posts whose title, content, summary or category names contain
        ``term`` (case-insensitive). A blank term matches everything.
        """
        qs = Blog.objects.all()
        term = (term or "").strip()
        if term:
            category_match = BlogCategory.objects.filter(
                blog=OuterRef("pk"),
                category__name__icontains=term,
            )
            qs = qs.filter(
                Q(title__icontains=term)
                | Q(content__icontains=term)
                | Q(summary__icontains=term)
                | Exists(category_match)
            )
        return self._listing(qs, viewer, category_ids, sort)

    def recent(self, viewer=None, count=None, category_ids=None):
        count = count or blog_settings.RECENT_COUNT
        qs = (
            self._visible(Blog.objects.all(), viewer, category_ids)
            .annotate(shown_at=Coalesce("published_at", "created_at"))
            .order_by("-shown_at", "-pk")[:count]
        )
        return self._finish(qs, viewer)

    def popular(self, viewer=None, count=None, category_ids=None):
        count = count or blog_settings.POPULAR_COUNT
        qs = (
            self._visible(Blog.objects.all(), viewer, category_ids)
            .order_by("-view_count", "-like_count", "-pk")[:count]
        )
        return self._finish(qs, viewer)

    # Writes

    def generate_unique_slug(self, title, exclude_id=None):
        return Blog.unique_slug(title, exclude_pk=exclude_id)

    def create(self, data, author, image=None):
        """
        Create a post for ``author``.

        Args:
            data: mapping of BlogForm fields
            author: the writing user
            image: optional uploaded file stored as the featured image

        Returns:
            The post as its author sees it.

        Raises:
            ValidationFailed: listing every invalid field.
            ImageUploadError: the featured image could not be stored.
        """
        cleaned = self._clean(data)
        image_url = self._upload(image) if image else cleaned["featured_image_url"]

        with transaction.atomic():
            now = timezone.now()
            blog = Blog(
                title=cleaned["title"],
                content=cleaned["content"],
                summary=cleaned["summary"],
                featured_image_url=image_url,
                meta_description=cleaned["meta_description"],
                author=author,
                is_published=cleaned["is_published"],
                slug=Blog.unique_slug(cleaned["title"]),
                created_at=now,
                published_at=now if cleaned["is_published"] else None,
            )
            blog.refresh_read_time()
            blog.save()
            blog.set_categories(cleaned["category_ids"])

        logger.info("Blog %s created by %s (slug=%s)", blog.pk, author.pk, blog.slug)
        return self.get_by_id(blog.pk, author)

    def update(self, blog_id, data, user, image=None):
        """
        Update a post. Only its author may.

        The slug is regenerated only when the title changes.

        Raises:
            NotFound: the post is missing, deleted or not the caller's.
            ValidationFailed: listing every invalid field.
        """
        blog = self._owned(blog_id, user)
        cleaned = self._clean(data)
        image_url = self._upload(image) if image else cleaned["featured_image_url"]

        with transaction.atomic():
            if cleaned["title"] != blog.title:
                blog.slug = Blog.unique_slug(cleaned["title"], exclude_pk=blog.pk)

            blog.title = cleaned["title"]
            blog.content = cleaned["content"]
            blog.summary = cleaned["summary"]
            blog.featured_image_url = image_url
            blog.meta_description = cleaned["meta_description"]
            blog.refresh_read_time()
            if cleaned["is_published"]:
                blog.mark_published()
            else:
                blog.is_published = False
            blog.updated_at = timezone.now()
            blog.save(update_fields=EDITABLE_FIELDS)
            blog.set_categories(cleaned["category_ids"])

        logger.info("Blog %s updated by %s", blog.pk, user.pk)
        return self.get_by_id(blog.pk, user)

    def delete(self, blog_id, user):
        """
        Soft delete a post. Only its author may.

        Raises:
            NotFound: the post is missing, already deleted or not the
                caller's.
        """
        blog = self._owned(blog_id, user)
        blog.soft_delete(actor=user)
        logger.info("Blog %s deleted by %s", blog.pk, user.pk)
        return blog

    def restore(self, blog_id, user):
        """
        Undo a soft delete. Only the author may.

        If a live post took the slug in the meantime, a fresh one is derived
        from the title.
        """
        blog = Blog.objects.deleted().filter(pk=blog_id).first()
        if blog is None or not blog.is_owned_by(user):
            raise NotFound("Blog not found")

        with transaction.atomic():
            if Blog.objects.active().filter(slug=blog.slug).exists():
                blog.slug = Blog.unique_slug(blog.title, exclude_pk=blog.pk)
                blog.save(update_fields=["slug"])
            blog.restore()

        logger.info("Blog %s restored by %s", blog.pk, user.pk)
        return blog

    def publish(self, blog_id, user):
        """Publish a post. Publishing an already published post changes nothing."""
        blog = self._owned(blog_id, user)
        if blog.mark_published():
            blog.updated_at = timezone.now()
            blog.save(update_fields=["is_published", "published_at", "updated_at"])
            logger.info("Blog %s published", blog.pk)
        return blog

    def unpublish(self, blog_id, user):
        """Return a post to draft. ``published_at`` is kept."""
        blog = self._owned(blog_id, user)
        blog.is_published = False
        blog.updated_at = timezone.now()
        blog.save(update_fields=["is_published", "updated_at"])
        logger.info("Blog %s unpublished", blog.pk)
        return blog

    def increment_view_count(self, blog_id):
        """Count a view of a published post. Returns False if none matched."""
        updated = Blog.objects.active().published().filter(pk=blog_id).update(
            view_count=F("view_count") + 1,
        )
        return updated > 0

    # Engagement

    def toggle_like(self, blog_id, user):
        return self.likes.toggle(blog_id, user)

    def is_liked(self, blog_id, user):
        return self.likes.is_liked(blog_id, user)

    def likes_for(self, blog_id, requester):
        return self.likes.list_for_blog(blog_id, requester)

    def add_comment(self, blog_id, content, user):
        return self.comments.create(blog_id, content, user)

    def comments_for(self, blog_id, viewer=None):
        return self.comments.list_for_blog(blog_id, viewer)

    def comments_for_author(self, blog_id, requester):
        return self.comments.list_for_author(blog_id, requester)

    # Helpers

    def _clean(self, data):
        form = BlogForm(data)
        if not form.is_valid():
            raise ValidationFailed(form.errors.as_data())
        return form.cleaned_data

    def _upload(self, image):
        return self.images.upload_file(image)

    def _owned(self, blog_id, user):
        blog = Blog.objects.active().filter(pk=blog_id).first()
        if blog is None or not blog.is_owned_by(user):
            logger.debug("User %s cannot modify blog %s", user_pk(user), blog_id)
            raise NotFound("Blog not found")
        return blog

    def _visible(self, qs, viewer, category_ids):
        return qs.visible_to(viewer).in_categories(category_ids).with_engagement(viewer)

    def _listing(self, qs, viewer, category_ids, sort):
        qs = self._visible(qs, viewer, category_ids).sorted_by(sort)
        return self._finish(qs, viewer)

    def _finish(self, qs, viewer):
        blogs = list(qs.select_related("author"))
        for blog in blogs:
            blog.is_owner = blog.is_owned_by(viewer)
        self._attach_categories(blogs)
        return blogs

    def _detail(self, qs, viewer):
        blog = (
            qs.active()
            .with_engagement(viewer)
            .select_related("author")
            .first()
        )
        if blog is None or not blog.can_view(viewer):
            return None

        blog.is_owner = blog.is_owned_by(viewer)
        self._attach_categories([blog])
        if blog.is_owner:
            blog.visible_comments = self.comments.list_for_blog(blog.pk, viewer)
            blog.visible_likes = self.likes.list_for_blog(blog.pk, viewer)
        else:
            blog.visible_comments = []
            blog.visible_likes = []
        return blog

    @staticmethod
    def _attach_categories(blogs):
        """Load category lists for ``blogs`` with a single join-table query."""
        by_blog = defaultdict(list)
        links = (
            BlogCategory.objects.filter(blog_id__in=[blog.pk for blog in blogs])
            .select_related("category")
            .order_by("category__name")
        )
        for link in links:
            by_blog[link.blog_id].append(link.category)
        for blog in blogs:
            blog.category_list = by_blog[blog.pk]
