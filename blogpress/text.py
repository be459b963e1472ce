"""
Text helpers: slug generation and reading time estimates.
"""
import math
import re

from .conf import blog_settings

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(title):
    """
    Turn a title into a URL-safe slug.

    Only ``[a-z0-9-]`` survives, hyphen runs collapse to one, and the result
    is capped at SLUG_MAX_LENGTH without a dangling hyphen. A title with
    nothing usable left becomes SLUG_FALLBACK.

        >>> slugify("  Hello, World!  ")
        'hello-world'
    """
    if not title or not title.strip():
        return blog_settings.SLUG_FALLBACK

    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub(" ", slug).strip()
    slug = slug.replace(" ", "-")
    slug = _HYPHENS.sub("-", slug).strip("-")

    max_length = blog_settings.SLUG_MAX_LENGTH
    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")

    return slug or blog_settings.SLUG_FALLBACK


def word_count(content):
    return len(content.split()) if content else 0


def estimate_read_time(content):
    """Minutes needed to read ``content``, never less than one."""
    words = word_count(content)
    return max(1, math.ceil(words / blog_settings.WORDS_PER_MINUTE))
