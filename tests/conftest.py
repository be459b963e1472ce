"""
Shared fixtures for blogpress tests.
"""
import pytest
from django.contrib.auth import get_user_model

from blogpress.models import Category
from blogpress.services import BlogService, CategoryService, CommentService, LikeService

User = get_user_model()


@pytest.fixture
def author(db):
    """The user who writes posts."""
    return User.objects.create_user(
        username="author",
        email="author@example.com",
        password="testpass123",
    )


@pytest.fixture
def reader(db):
    """Another signed-in user."""
    return User.objects.create_user(
        username="reader",
        email="reader@example.com",
        password="testpass123",
    )


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        username="editor",
        email="editor@example.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def category(db):
    return Category.objects.create(name="Python", description="Posts about Python")


@pytest.fixture
def other_category(db):
    return Category.objects.create(name="Django", description="Web framework")


@pytest.fixture
def blogs():
    return BlogService()


@pytest.fixture
def categories():
    return CategoryService()


@pytest.fixture
def likes():
    return LikeService()


@pytest.fixture
def comments():
    return CommentService()


@pytest.fixture
def blog_data(category):
    """Build valid post form data, overridable per test."""

    def build(**overrides):
        data = {
            "title": "Test Post",
            "content": "This is the body of a test post.",
            "category_ids": [category.pk],
            "is_published": True,
        }
        data.update(overrides)
        return data

    return build


@pytest.fixture
def post(blogs, author, blog_data):
    """A published post by ``author``."""
    return blogs.create(blog_data(), author)


@pytest.fixture
def draft(blogs, author, blog_data):
    """An unpublished post by ``author``."""
    return blogs.create(blog_data(title="Draft Post", is_published=False), author)
