"""Celery application configuration."""

from celery import Celery

from config import settings

celery_app = Celery(
    "lantern",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # All audit tasks go to the "audits" queue
    task_routes={
        "worker.tasks.*": {"queue": "audits"},
    },

    task_acks_late=True,
    task_reject_on_worker_lost=True,
    # One browser per worker process at a time
    worker_prefetch_multiplier=1,

    # Navigation timeout plus every analyzer timeout, with headroom
    task_time_limit=int(settings.navigation_timeout + settings.page_analyzer_timeout) * 4,

    result_expires=86400,
    broker_connection_retry_on_startup=True,
)

celery_app.autodiscover_tasks(["worker"])
