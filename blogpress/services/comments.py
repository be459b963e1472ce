"""
Comments on blog posts.
"""
import logging

from ..exceptions import NotFound, ValidationFailed
from ..forms import CommentForm
from ..models import Blog, Comment, user_pk

logger = logging.getLogger(__name__)


def _clean_content(content):
    form = CommentForm({"content": content})
    if not form.is_valid():
        raise ValidationFailed(form.errors.as_data())
    return form.cleaned_data["content"]


class CommentService:
    """Create, edit, delete and list comments."""

    def create(self, blog_id, content, user):
        """
        Add a comment to a published post.

        Raises:
            NotFound: the post is missing, deleted or unpublished.
            ValidationFailed: the content is empty or too long.
        """
        blog = Blog.objects.active().published().filter(pk=blog_id).first()
        if blog is None:
            raise NotFound("Blog not found")

        comment = Comment.objects.create(
            blog=blog,
            user=user,
            content=_clean_content(content),
        )
        comment.is_owner = True
        comment.can_edit = True
        return comment

    def update(self, comment_id, content, user):
        """
        Edit a comment. Only its author may.

        Raises:
            NotFound: the comment is missing, deleted or not the caller's.
            ValidationFailed: the content is empty or too long.
        """
        comment = (
            Comment.objects.active()
            .select_related("blog", "user")
            .filter(pk=comment_id, user_id=user_pk(user))
            .first()
        )
        if comment is None:
            logger.debug("User %s cannot edit comment %s", user_pk(user), comment_id)
            raise NotFound("Comment not found")

        comment.edit(_clean_content(content))
        comment.is_owner = True
        comment.can_edit = True
        return comment

    def delete(self, comment_id, user):
        """
        Soft delete a comment, as its author or as the post's author.

        Raises:
            NotFound: the comment is missing, deleted or the caller may not
                remove it.
        """
        comment = (
            Comment.objects.active()
            .select_related("blog")
            .filter(pk=comment_id)
            .first()
        )
        viewer_id = user_pk(user)
        if comment is None or viewer_id not in (comment.user_id, comment.blog.author_id):
            logger.debug("User %s cannot delete comment %s", viewer_id, comment_id)
            raise NotFound("Comment not found")

        comment.soft_delete(actor=user)
        return comment

    def list_for_blog(self, blog_id, viewer=None):
        """
        Live comments on a post, oldest first.

        Each comment is flagged with ``is_owner`` (the viewer wrote it) and
        ``can_edit`` (the viewer wrote it or owns the post).
        """
        viewer_id = user_pk(viewer)
        comments = list(
            Comment.objects.active()
            .filter(blog_id=blog_id)
            .select_related("user", "blog")
            .order_by("created_at", "pk")
        )
        for comment in comments:
            comment.is_owner = viewer_id is not None and comment.user_id == viewer_id
            comment.can_edit = viewer_id is not None and viewer_id in (
                comment.user_id,
                comment.blog.author_id,
            )
        return comments

    def list_for_author(self, blog_id, requester):
        """Comments on a post for its author; empty for anyone else."""
        blog = Blog.objects.active().filter(pk=blog_id).first()
        if blog is None or not blog.is_owned_by(requester):
            return []
        return self.list_for_blog(blog_id, requester)

    def count(self, blog_id):
        return Comment.objects.active().filter(blog_id=blog_id).count()
