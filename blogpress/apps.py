"""Django app configuration for blogpress."""
from django.apps import AppConfig


class BlogpressConfig(AppConfig):
    """Configuration for the blogpress app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "blogpress"
    verbose_name = "Blogpress"
