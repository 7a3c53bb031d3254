"""Celery tasks for running page audits."""

import asyncio
import uuid
from datetime import datetime, timezone
from pathlib import Path

from celery.utils.log import get_task_logger

from config import settings
from core.errors import NavigationError
from core.options import AuditOptions
from core.runner import run_audit
from db.models import AuditRun, AuditStatus, CategoryResult
from db.session import get_sync_session
from scoring.aggregator import AuditScores
from worker.celery_app import celery_app

logger = get_task_logger(__name__)


def category_rows(audit_id: uuid.UUID, scores: AuditScores) -> list[CategoryResult]:
    """One CategoryResult row per scored category."""
    return [
        CategoryResult(
            audit_id=audit_id,
            category=category.name,
            score=category.score,
            grade=category.grade,
            issue_count=len(category.issues),
            missing_metrics=list(category.missing_metrics),
        )
        for category in scores.categories.values()
    ]


def _mark_failed(audit_uuid: uuid.UUID, message: str) -> None:
    with get_sync_session() as session:
        audit = session.get(AuditRun, audit_uuid)
        audit.status = AuditStatus.FAILED
        audit.error_message = message
        audit.completed_at = datetime.now(timezone.utc)
        session.commit()


@celery_app.task(bind=True, name="worker.tasks.run_page_audit")
def run_page_audit(self, audit_id: str) -> dict:
    """
    Run one queued audit and store its report.

    Analyzer failures end up inside the report; only a page that cannot be
    loaded, or a crash outside the analyzers, marks the audit as failed.
    """
    audit_uuid = uuid.UUID(audit_id)
    logger.info(f"Starting audit {audit_id}")

    with get_sync_session() as session:
        audit = session.get(AuditRun, audit_uuid)
        if not audit:
            logger.error(f"Audit {audit_id} not found")
            return {"error": f"Audit {audit_id} not found"}

        options = AuditOptions(
            url=audit.url,
            output_path=str(Path(settings.report_dir) / f"{audit_id}.json"),
            **(audit.options or {}),
        )
        audit.status = AuditStatus.RUNNING
        audit.started_at = datetime.now(timezone.utc)
        session.commit()

    try:
        outcome = asyncio.run(run_audit(options))
    except NavigationError as e:
        logger.warning(f"Audit {audit_id} failed: {e}")
        _mark_failed(audit_uuid, str(e))
        return {"audit_id": audit_id, "status": "failed", "error": str(e)}
    except Exception as e:
        logger.exception(f"Audit {audit_id} crashed: {e}")
        _mark_failed(audit_uuid, str(e))
        return {"audit_id": audit_id, "status": "failed", "error": str(e)}

    scores = outcome.scores
    with get_sync_session() as session:
        audit = session.get(AuditRun, audit_uuid)
        audit.report = outcome.report
        audit.overall_score = scores.overall_score
        audit.grade = scores.overall_grade
        audit.status = AuditStatus.COMPLETED
        audit.completed_at = datetime.now(timezone.utc)
        session.add_all(category_rows(audit_uuid, scores))
        session.commit()

    logger.info(f"Audit {audit_id} completed: {scores.overall_score} ({scores.overall_grade})")

    return {
        "audit_id": audit_id,
        "status": "completed",
        "overall_score": scores.overall_score,
        "grade": scores.overall_grade,
        "analyzer_errors": outcome.context.errors,
        "report_saved": outcome.saved,
    }
