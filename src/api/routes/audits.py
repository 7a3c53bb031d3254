"""Audit API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas import (
    AuditCreatedResponse,
    AuditCreateRequest,
    AuditDetailResponse,
    AuditListResponse,
    CategoryHistoryResponse,
)
from core.budgets import BUDGETS
from db.models import AuditRun, AuditStatus
from db.repositories import AuditRunRepository, CategoryResultRepository
from db.session import get_db_session
from scoring.weights import CATEGORY_WEIGHTS
from worker.tasks import run_page_audit

router = APIRouter(prefix="/audits", tags=["Audits"])


async def _get_audit_or_404(audit_id: uuid.UUID, db: AsyncSession) -> AuditRun:
    audit = await AuditRunRepository(db).get_by_id(audit_id)
    if not audit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Audit {audit_id} not found",
        )
    return audit


@router.post(
    "",
    response_model=AuditCreatedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Queue a new audit",
    description="Queue a page audit. Returns immediately with the audit ID.",
)
async def create_audit(
    request: AuditCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuditCreatedResponse:
    """
    Create a new audit job.

    The audit runs in the worker; poll GET /audits/{id} for status and
    fetch GET /audits/{id}/report once it has completed.
    """
    if request.budget is not None and request.budget not in BUDGETS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid budget: {request.budget}. Must be one of: {', '.join(BUDGETS)}",
        )

    repo = AuditRunRepository(db)
    audit = await repo.create(url=str(request.url), options=request.to_options())
    await db.commit()

    run_page_audit.delay(str(audit.id))

    return AuditCreatedResponse(
        id=audit.id,
        url=audit.url,
        status=audit.status.value,
    )


@router.get(
    "",
    response_model=AuditListResponse,
    summary="List recent audits",
    description="Get recent audits, newest first, optionally for one URL.",
)
async def list_audits(
    limit: int = 20,
    url: str | None = None,
    db: AsyncSession = Depends(get_db_session),
) -> AuditListResponse:
    audits = await AuditRunRepository(db).list_recent(limit=limit, url=url)
    return AuditListResponse(audits=audits, count=len(audits))


@router.get(
    "/history",
    response_model=CategoryHistoryResponse,
    summary="Category score history",
    description="Scores of one category across completed audits of a URL.",
)
async def category_history(
    url: str,
    category: str,
    limit: int = 20,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryHistoryResponse:
    if category not in CATEGORY_WEIGHTS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid category: {category}. Must be one of: {', '.join(CATEGORY_WEIGHTS)}",
        )

    rows = await CategoryResultRepository(db).history(url, category, limit=limit)
    return CategoryHistoryResponse(url=url, category=category, points=rows)


@router.get(
    "/{audit_id}",
    response_model=AuditDetailResponse,
    summary="Get audit details",
    description="Status, overall score and per-category scores of an audit.",
)
async def get_audit(
    audit_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> AuditDetailResponse:
    audit = await _get_audit_or_404(audit_id, db)
    return AuditDetailResponse.model_validate(audit)


@router.get(
    "/{audit_id}/report",
    summary="Get audit report",
    description="The full JSON report of a completed audit.",
)
async def get_audit_report(
    audit_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    audit = await _get_audit_or_404(audit_id, db)

    if audit.status != AuditStatus.COMPLETED or audit.report is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Audit {audit_id} has no report (status: {audit.status.value})",
        )

    return audit.report
