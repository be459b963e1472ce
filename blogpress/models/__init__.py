"""
Models for blogpress.

All models are importable from blogpress.models:

    from blogpress.models import Blog, Category, Comment, Like
"""
from .base import Deletion, SoftDeleteModel, SoftDeleteQuerySet, user_pk
from .categories import Category
from .comments import Comment, Like
from .blogs import Blog, BlogCategory, BlogQuerySet, BlogSort

__all__ = [
    # Shared
    "Deletion",
    "SoftDeleteModel",
    "SoftDeleteQuerySet",
    "user_pk",
    # Categories
    "Category",
    # Posts
    "Blog",
    "BlogCategory",
    "BlogQuerySet",
    "BlogSort",
    # Engagement
    "Comment",
    "Like",
]
