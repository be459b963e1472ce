"""
Exceptions raised by the blogpress services.

NotFound and Forbidden subclass the Django exceptions the request handler
already turns into 404 and 403 responses, so views can let them propagate.
"""
from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404


class NotFound(Http404):
    """Entity is missing, soft-deleted, or not owned by the caller."""


class Forbidden(PermissionDenied):
    """Caller lacks the role required for the operation."""


class ValidationFailed(ValidationError):
    """
    One or more fields failed validation.

    Always built from a ``{field: [messages]}`` mapping so that every
    violated field is reported, available as ``message_dict``.
    """


class Conflict(ValidationFailed):
    """A uniqueness rule was violated (e.g. duplicate category name)."""


class ImageUploadError(Exception):
    """The object store rejected or failed an image upload."""
