from datetime import timedelta

from celery import Celery

from hr_portal.core.config import settings

celery_app = Celery(
    "hr_worker",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "hr_portal.workers.reconciliation_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    broker_connection_retry_on_startup=True,
)

celery_app.conf.beat_schedule = {
    "sync-employee-statuses": {
        "task": "hr_portal.workers.reconciliation_tasks.sync_employee_statuses",
        "schedule": timedelta(minutes=settings.EMPLOYEE_STATUS_SYNC_MINUTES),
    },
}

if settings.LEAVE_SIMULATION_ENABLED:
    celery_app.conf.beat_schedule["simulate-leave-decisions"] = {
        "task": "hr_portal.workers.reconciliation_tasks.simulate_leave_decisions",
        "schedule": timedelta(seconds=settings.LEAVE_SIMULATION_INTERVAL_SECONDS),
    }
