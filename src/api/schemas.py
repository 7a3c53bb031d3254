"""Pydantic schemas for API request/response validation."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from core.options import ThresholdOverride


# =============================================================================
# Request Schemas
# =============================================================================


class AuditCreateRequest(BaseModel):
    """Request body for queueing a new audit."""

    url: HttpUrl = Field(
        ...,
        description="The URL of the page to audit",
        examples=["https://example.com"],
    )
    budget: str | None = Field(
        default=None,
        description="Named performance budget (default, ecommerce, corporate, blog)",
        examples=["ecommerce"],
    )
    budget_overrides: dict[str, ThresholdOverride] = Field(
        default_factory=dict,
        description="Per-vital threshold overrides applied on top of the budget",
        examples=[{"lcp": {"good": 2000, "needs_work": 3500, "max": 6000}}],
    )
    screenshots: bool = Field(
        default=False,
        description="Capture a full-page screenshot",
    )

    def to_options(self) -> dict:
        """Options as stored on the audit run and passed to the worker."""
        return self.model_dump(mode="json", exclude={"url"}, exclude_none=True)


# =============================================================================
# Response Schemas
# =============================================================================


class CategoryResultResponse(BaseModel):
    """Score of one category within an audit."""

    model_config = ConfigDict(from_attributes=True)

    category: str
    score: float
    grade: str
    issue_count: int
    missing_metrics: list[str] | None


class AuditResponse(BaseModel):
    """Audit run without the full report."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    url: str
    status: str
    overall_score: float | None
    grade: str | None
    error_message: str | None
    created_at: datetime
    started_at: datetime | None
    completed_at: datetime | None


class AuditDetailResponse(AuditResponse):
    """Audit run with its per-category scores."""

    options: dict | None
    categories: list[CategoryResultResponse] = []


class AuditCreatedResponse(BaseModel):
    """Response when an audit is successfully queued."""

    id: uuid.UUID
    url: str
    status: str
    message: str = "Audit queued successfully"


class AuditListResponse(BaseModel):
    audits: list[AuditResponse]
    count: int


class CategoryHistoryPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    audit_id: uuid.UUID
    score: float
    grade: str
    issue_count: int
    created_at: datetime


class CategoryHistoryResponse(BaseModel):
    """Scores of one category across past audits of a URL, newest first."""

    url: str
    category: str
    points: list[CategoryHistoryPoint]


# =============================================================================
# Health Check
# =============================================================================


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = "healthy"
    service: str = "lantern"
    version: str = "0.1.0"
