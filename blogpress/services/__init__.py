"""
Service layer for blogpress.

    from blogpress.services import BlogService

    blogs = BlogService()
    post = blogs.create(data, author=request.user)
"""
from .blogs import BlogService
from .categories import CategoryService, PagedResult
from .comments import CommentService
from .images import S3ImageStorage, get_image_storage
from .likes import LikeService

__all__ = [
    "BlogService",
    "CategoryService",
    "CommentService",
    "LikeService",
    "PagedResult",
    "S3ImageStorage",
    "get_image_storage",
]
