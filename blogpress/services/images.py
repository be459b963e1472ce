"""
Featured image storage on Amazon S3.
"""
import io
import logging
import mimetypes
import os
import uuid
from functools import lru_cache
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from django.utils import timezone
from PIL import Image, UnidentifiedImageError

from ..conf import blog_settings
from ..exceptions import ImageUploadError, ValidationFailed

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}


class S3ImageStorage:
    """
    Uploads images to an S3 bucket and hands back their public URLs.

    Args:
        client: boto3 S3 client. Built from settings when omitted.
        bucket: bucket name, defaults to S3_BUCKET.
        region: bucket region, defaults to AWS_REGION.
    """

    def __init__(self, client=None, bucket=None, region=None):
        self.bucket_name = bucket or blog_settings.S3_BUCKET
        self.region = region or blog_settings.AWS_REGION
        self.s3_client = client or boto3.client(
            "s3",
            region_name=self.region,
            aws_access_key_id=blog_settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=blog_settings.AWS_SECRET_ACCESS_KEY,
        )

    def validate(self, content, content_type, filename=None):
        """
        Check size, extension, declared type and that the bytes are an image.

        Raises ValidationFailed listing every problem found.
        """
        errors = []
        extension = self._extension(filename, content_type)

        if len(content) > blog_settings.IMAGE_MAX_SIZE:
            errors.append(
                f"Image cannot exceed {blog_settings.IMAGE_MAX_SIZE_MB} MB."
            )
        if extension not in blog_settings.ALLOWED_IMAGE_EXTENSIONS:
            errors.append(f"Unsupported image extension: {extension or 'none'}.")
        if (content_type or "").lower() not in blog_settings.ALLOWED_IMAGE_TYPES:
            errors.append(f"Unsupported content type: {content_type or 'none'}.")
        if not errors:
            try:
                with Image.open(io.BytesIO(content)) as img:
                    img.verify()
            except (UnidentifiedImageError, OSError, SyntaxError):
                errors.append("File is not a valid image.")

        if errors:
            raise ValidationFailed({"image": errors})
        return extension

    def upload(self, content, content_type, filename=None, folder=None):
        """
        Store image bytes and return their public URL.

        Args:
            content: raw image bytes
            content_type: declared MIME type
            filename: original filename, used for the extension and metadata
            folder: key prefix, defaults to IMAGE_FOLDER

        Returns:
            Public URL of the stored object.

        Raises:
            ValidationFailed: the image is rejected before upload.
            ImageUploadError: S3 refused or failed the upload.
        """
        extension = self.validate(content, content_type, filename)
        folder = folder or blog_settings.IMAGE_FOLDER
        now = timezone.now()
        key = f"{folder}/{now:%Y/%m/%d}/{uuid.uuid4().hex}{extension}"

        params = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": content,
            "ContentType": content_type,
            "Metadata": {
                "original-filename": filename or "",
                "upload-date": now.isoformat(),
            },
        }
        if blog_settings.S3_OBJECT_ACL:
            params["ACL"] = blog_settings.S3_OBJECT_ACL

        try:
            self.s3_client.put_object(**params)
        except (ClientError, BotoCoreError) as exc:
            logger.exception("Failed to upload image %s to %s", filename, self.bucket_name)
            raise ImageUploadError(f"Failed to upload image: {exc}") from exc

        logger.info("Uploaded image %s as %s", filename, key)
        return self.get_public_url(key)

    def upload_file(self, uploaded_file, folder=None):
        """Upload a Django UploadedFile."""
        if uploaded_file.size > blog_settings.IMAGE_MAX_SIZE:
            raise ValidationFailed({
                "image": [f"Image cannot exceed {blog_settings.IMAGE_MAX_SIZE_MB} MB."],
            })
        content = uploaded_file.read()
        return self.upload(
            content,
            uploaded_file.content_type,
            filename=uploaded_file.name,
            folder=folder,
        )

    def delete(self, image_url):
        """
        Delete the object behind a URL returned by ``upload``.

        Returns True if S3 accepted the delete, False otherwise.
        """
        if not image_url:
            return False

        key = urlparse(image_url).path.lstrip("/")
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError):
            logger.exception("Failed to delete image %s", image_url)
            return False
        return True

    def get_public_url(self, key):
        base_url = blog_settings.S3_BASE_URL
        if not base_url:
            base_url = f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com"
        return f"{base_url.rstrip('/')}/{key}"

    @staticmethod
    def _extension(filename, content_type):
        if filename:
            extension = os.path.splitext(filename)[1].lower()
            if extension:
                return extension
        for extension, mime in CONTENT_TYPES.items():
            if mime == (content_type or "").lower():
                return extension
        return mimetypes.guess_extension(content_type or "") or ""


@lru_cache(maxsize=None)
def get_image_storage():
    """Return the process-wide storage built from settings."""
    return S3ImageStorage()
