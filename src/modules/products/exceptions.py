"""Product domain exceptions.

Raised by the Service Layer and the image storage; the API layer
translates them into HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""


class InvalidImage(Exception):
    """Uploaded file has an unsupported extension or is too large."""


class ImageStorageUnavailable(Exception):
    """Cloudinary credentials are not configured."""


class ImageUploadFailed(Exception):
    """Cloudinary rejected or failed the upload."""
