"""Celery application configuration."""

from celery import Celery

from rideshare.config import get_settings

settings = get_settings()

app = Celery(
    "rideshare",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["rideshare.tasks.notifications"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_soft_time_limit=settings.notification_task_time_limit,
    task_time_limit=settings.notification_task_time_limit + 15,
    # Fan-out results are only read for debugging
    result_expires=3600,
    # A lost fan-out is not redelivered
    task_acks_late=False,
)
