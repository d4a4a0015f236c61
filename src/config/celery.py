"""Celery app of the storefront API.

Workers only run background clean-up (Cloudinary image deletion); the
HTTP API never waits on them.  Configuration lives in Django settings
under the ``CELERY_`` prefix.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("storefront")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks(lambda: ["modules.products"])
