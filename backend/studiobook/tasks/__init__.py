"""Celery tasks for scheduled studio jobs."""
