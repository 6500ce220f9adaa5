# Celery instance is defined in rl_project/celery.py
# It points Celery at the Django settings so scheduled billing
# and settlement runs share the same configuration as the web app
from .celery import celery_app

# 'from rl_project import *', only exports celery_app
__all__ = ("celery_app",)

""" Run workers with "celery -A rl_project worker -l info"
    The -A rl_project means:
    Import rl_project/__init__.py →
    which exposes celery_app →  now Celery knows what to run. """
