from __future__ import annotations
import os
from celery import Celery

# ensure Django settings are set for Celery
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "books_project.settings")

# name should match the project package
celery_app = Celery("books_project")

# read config from Django settings, using CELERY_ prefix
# (CELERY_BROKER_URL, CELERY_TASK_ALWAYS_EAGER, ...)
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# pick up ledger_core.tasks (refresh_ledger_balances, rebuild_item_quantities)
celery_app.autodiscover_tasks()
