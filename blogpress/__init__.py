"""
blogpress - A Django blog publishing app.

Features:
- Draft/publish workflow with first-publication timestamps
- Soft delete and restore for posts, categories and comments
- Unique, URL-safe slugs derived from titles
- Likes and comments with denormalized like counts
- Category tagging with case-insensitive unique names
- Featured image uploads to Amazon S3
"""

__version__ = "0.1.0"
