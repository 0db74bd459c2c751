"""
Celery configuration for the supply_ledger project.
"""
import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "supply_ledger.settings.base")

app = Celery("supply_ledger")

app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
