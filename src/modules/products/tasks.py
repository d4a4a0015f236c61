"""Background jobs of the products module."""

from __future__ import annotations

import cloudinary.exceptions
import structlog
from celery import shared_task
from django.db import transaction
from kombu.exceptions import OperationalError

from modules.products.exceptions import ImageStorageUnavailable
from modules.products.storage import extract_public_id, get_image_storage

logger = structlog.get_logger(__name__)


@shared_task(name="products.delete_image")
def delete_product_image(public_id: str) -> bool:
    """Remove an image from Cloudinary; failures are logged, never raised."""
    log = logger.bind(public_id=public_id)
    try:
        get_image_storage().delete(public_id)
    except ImageStorageUnavailable:
        log.warning("image.delete_skipped", reason="storage_not_configured")
        return False
    except cloudinary.exceptions.Error as exc:
        log.error("image.delete_failed", error=str(exc))
        return False
    return True


def _enqueue_deletion(public_id: str) -> None:
    try:
        delete_product_image.delay(public_id)
    except OperationalError as exc:
        logger.error("image.delete_enqueue_failed", public_id=public_id, error=str(exc))


def schedule_image_deletion(image_url: str) -> None:
    """Queue deletion of ``image_url`` after the current transaction commits."""
    public_id = extract_public_id(image_url)
    if not public_id:
        return
    transaction.on_commit(lambda: _enqueue_deletion(public_id))
