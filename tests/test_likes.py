"""
Tests for the like service.
"""
import pytest
from django.contrib.auth import get_user_model

from blogpress.exceptions import NotFound
from blogpress.models import Blog, Like

User = get_user_model()


class TestToggle:
    def test_like_then_unlike(self, likes, reader, post):
        assert likes.toggle(post.pk, reader) is True
        assert likes.is_liked(post.pk, reader)
        assert Blog.objects.get(pk=post.pk).like_count == 1

        assert likes.toggle(post.pk, reader) is False
        assert not likes.is_liked(post.pk, reader)
        assert Blog.objects.get(pk=post.pk).like_count == 0

    def test_author_can_like_own_post(self, likes, author, post):
        assert likes.toggle(post.pk, author) is True
        assert likes.count(post.pk) == 1

    def test_counter_matches_rows(self, likes, post, db):
        users = [User.objects.create_user(username=f"u{i}", password="pass") for i in range(6)]
        for user in users:
            likes.toggle(post.pk, user)
        likes.toggle(post.pk, users[3])

        assert likes.count(post.pk) == 5
        assert Blog.objects.get(pk=post.pk).like_count == 5

    def test_draft_is_not_found(self, likes, reader, draft):
        with pytest.raises(NotFound):
            likes.toggle(draft.pk, reader)
        assert Like.objects.count() == 0

    def test_deleted_post_is_not_found(self, likes, blogs, author, reader, post):
        blogs.delete(post.pk, author)
        with pytest.raises(NotFound):
            likes.toggle(post.pk, reader)

    def test_missing_post_is_not_found(self, likes, reader):
        with pytest.raises(NotFound):
            likes.toggle(424242, reader)


class TestQueries:
    def test_is_liked_for_anonymous(self, likes, post):
        assert likes.is_liked(post.pk, None) is False

    def test_list_only_for_author(self, likes, author, reader, staff_user, post):
        likes.toggle(post.pk, reader)
        likes.toggle(post.pk, staff_user)

        listed = likes.list_for_blog(post.pk, author)
        assert [like.user for like in listed] == [staff_user, reader]
        assert likes.list_for_blog(post.pk, reader) == []
        assert likes.list_for_blog(post.pk, None) == []
