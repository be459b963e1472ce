"""
Configuration settings for blogpress.

Override these in your Django settings.py:

    BLOGPRESS = {
        'POSTS_PER_PAGE': 10,
        'S3_BUCKET': 'my-blog-images',
        'AWS_REGION': 'eu-west-1',
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Slugs
    "SLUG_MAX_LENGTH": 50,
    "SLUG_FALLBACK": "untitled",

    # Reading time
    "WORDS_PER_MINUTE": 200,

    # Listings
    "POSTS_PER_PAGE": 10,
    "CATEGORIES_PER_PAGE": 10,
    "RECENT_COUNT": 10,
    "POPULAR_COUNT": 10,

    # Images
    "IMAGE_MAX_SIZE_MB": 10,
    "ALLOWED_IMAGE_EXTENSIONS": [".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"],
    "ALLOWED_IMAGE_TYPES": [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
    ],
    "IMAGE_FOLDER": "blog-images",

    # Amazon S3
    "S3_BUCKET": "",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": None,
    "AWS_SECRET_ACCESS_KEY": None,
    "S3_BASE_URL": None,
    "S3_OBJECT_ACL": "public-read",
}


class BlogpressSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blogpress.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blogpress setting: {name}")

        user_settings = getattr(settings, "BLOGPRESS", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def IMAGE_MAX_SIZE(self):
        """Maximum image upload size in bytes."""
        return self.IMAGE_MAX_SIZE_MB * 1024 * 1024


blog_settings = BlogpressSettings()
