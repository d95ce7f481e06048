import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

app = Celery("core_backend")

# All CELERY_* settings are read from Django settings.
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
