# Celery instance is defined in books_project/celery.py
# It creates celery_app object and points it to Django settings
from .celery import celery_app

# 'from books_project import *', only exports celery_app
__all__ = ("celery_app",)

""" Workers start with "celery -A books_project worker -l info":
    -A books_project imports this module, which exposes celery_app. """
