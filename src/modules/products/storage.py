"""Product image hosting on Cloudinary.

Credentials come from ``settings.CLOUDINARY`` (parsed from
``CLOUDINARY_URL``).  When they are missing ``get_image_storage()``
raises ``ImageStorageUnavailable`` and only image operations fail; the
rest of the catalog keeps working.
"""

from __future__ import annotations

import os
import re
from typing import Any, Dict

import cloudinary.exceptions
import cloudinary.uploader
import structlog
from django.conf import settings

from modules.products.exceptions import (
    ImageStorageUnavailable,
    ImageUploadFailed,
    InvalidImage,
)

logger = structlog.get_logger(__name__)

ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
UPLOAD_MARKER = "/upload/"
VERSION_SEGMENT = re.compile(r"^v\d+/")


def extract_public_id(url: str) -> str:
    """Public id of a Cloudinary delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1234567890/products/sample.jpg``
    gives ``products/sample``.  Returns ``""`` for empty or non-upload URLs.
    """
    if not url or UPLOAD_MARKER not in url:
        return ""
    path = VERSION_SEGMENT.sub("", url.split(UPLOAD_MARKER, 1)[1], count=1)
    return os.path.splitext(path)[0]


def validate_image(upload) -> str:
    """Check extension and size of an uploaded file; return its stem."""
    stem, ext = os.path.splitext(upload.name or "")
    if ext.lower() not in ALLOWED_EXTENSIONS:
        allowed = ", ".join(e.lstrip(".") for e in ALLOWED_EXTENSIONS)
        raise InvalidImage(
            f"Invalid file type: {ext or 'none'}. Allowed types: {allowed}"
        )
    max_bytes = settings.PRODUCT_IMAGE_MAX_BYTES
    if upload.size is not None and upload.size > max_bytes:
        raise InvalidImage(
            f"Image too large: maximum size is {max_bytes // (1024 * 1024)} MB"
        )
    return stem


class CloudinaryImageStorage:
    """Uploads and deletes images through the Cloudinary SDK."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str) -> None:
        self.folder = folder
        self._credentials: Dict[str, Any] = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }

    def upload(self, upload) -> str:
        """Upload an image file and return its https URL.

        Raises:
            InvalidImage: unsupported extension or file too large.
            ImageUploadFailed: Cloudinary rejected the upload.
        """
        stem = validate_image(upload)
        log = logger.bind(filename=upload.name, folder=self.folder)
        try:
            result = cloudinary.uploader.upload(
                upload,
                folder=self.folder,
                resource_type="image",
                use_filename=True,
                filename_override=stem,
                unique_filename=True,
                overwrite=False,
                **self._credentials,
            )
        except cloudinary.exceptions.Error as exc:
            log.error("image.upload_failed", error=str(exc))
            raise ImageUploadFailed(f"Failed to upload image: {exc}") from exc

        url = result["secure_url"]
        log.info("image.uploaded", public_id=result.get("public_id"))
        return url

    def delete(self, public_id: str) -> None:
        """Remove an image; raises ``cloudinary.exceptions.Error`` on failure."""
        cloudinary.uploader.destroy(
            public_id, resource_type="image", **self._credentials
        )
        logger.info("image.deleted", public_id=public_id)


def is_configured() -> bool:
    creds = settings.CLOUDINARY
    return bool(creds["cloud_name"] and creds["api_key"] and creds["api_secret"])


def get_image_storage() -> CloudinaryImageStorage:
    """Storage built from settings.

    Raises:
        ImageStorageUnavailable: ``CLOUDINARY_URL`` is not configured.
    """
    if not is_configured():
        raise ImageStorageUnavailable("Image upload service is not available")
    creds = settings.CLOUDINARY
    return CloudinaryImageStorage(
        cloud_name=creds["cloud_name"],
        api_key=creds["api_key"],
        api_secret=creds["api_secret"],
        folder=creds["folder"],
    )
