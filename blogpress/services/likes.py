"""
Likes on blog posts.
"""
import logging

from django.db import transaction

from ..exceptions import NotFound
from ..models import Blog, Like, user_pk

logger = logging.getLogger(__name__)


class LikeService:
    """Records likes and keeps ``Blog.like_count`` in step with them."""

    def toggle(self, blog_id, user):
        """
        Like or unlike a published post.

        Returns True if ``user`` now likes the post.

        Raises:
            NotFound: the post is missing, deleted or unpublished.
        """
        with transaction.atomic():
            blog = (
                Blog.objects.select_for_update()
                .active()
                .published()
                .filter(pk=blog_id)
                .first()
            )
            if blog is None:
                raise NotFound("Blog not found")
            liked = Like.toggle(blog, user)

        logger.debug("User %s %s blog %s", user.pk, "liked" if liked else "unliked", blog_id)
        return liked

    def is_liked(self, blog_id, user):
        viewer_id = user_pk(user)
        if viewer_id is None:
            return False
        return Like.objects.filter(blog_id=blog_id, user_id=viewer_id).exists()

    def count(self, blog_id):
        return Like.objects.filter(blog_id=blog_id).count()

    def list_for_blog(self, blog_id, requester):
        """
        Likes on a post, newest first.

        Only the post's author gets the list; anyone else gets nothing.
        """
        blog = Blog.objects.active().filter(pk=blog_id).first()
        if blog is None or not blog.is_owned_by(requester):
            return []
        return list(
            Like.objects.filter(blog=blog)
            .select_related("user")
            .order_by("-liked_at", "-pk")
        )
