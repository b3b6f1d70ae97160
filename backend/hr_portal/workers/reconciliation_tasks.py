"""Celery tasks for the periodic reconciliation loops.

Each tick opens its own session. A failing tick is logged and reported in the
task result; the next scheduled tick runs regardless.
"""
import logging

from hr_portal.core.clock import utc_now
from hr_portal.core.config import settings
from hr_portal.db.session import SessionLocal
from hr_portal.services import leave_reconciliation
from hr_portal.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="hr_portal.workers.reconciliation_tasks.sync_employee_statuses")
def sync_employee_statuses():
    """Move employees between Active and OnLeave to match approved leave covering today."""
    try:
        with SessionLocal() as db:
            stats = leave_reconciliation.sync_employee_statuses(db, utc_now().date())
        logger.info("sync_employee_statuses: %s", stats)
        return {"status": "ok", **stats}
    except Exception as exc:
        logger.exception("sync_employee_statuses failed: %s", exc)
        return {"status": "error", "error": str(exc)}


@celery_app.task(name="hr_portal.workers.reconciliation_tasks.simulate_leave_decisions")
def simulate_leave_decisions():
    """Stand in for managers and decide Pending leave requests at random."""
    if not settings.LEAVE_SIMULATION_ENABLED:
        return {"status": "disabled"}

    decider = leave_reconciliation.SimulatedManagerDecider(
        approval_rate=settings.LEAVE_SIMULATION_APPROVAL_RATE,
        min_age_seconds=settings.LEAVE_SIMULATION_MIN_AGE_SECONDS,
    )
    try:
        with SessionLocal() as db:
            stats = leave_reconciliation.decide_pending_leaves(db, decider, utc_now())
        if stats["approved"] or stats["declined"]:
            logger.info("simulate_leave_decisions: %s", stats)
        return {"status": "ok", **stats}
    except Exception as exc:
        logger.exception("simulate_leave_decisions failed: %s", exc)
        return {"status": "error", "error": str(exc)}
