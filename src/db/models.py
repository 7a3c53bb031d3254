"""SQLAlchemy database models for Lantern."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AuditStatus(str, enum.Enum):
    """Status of an audit job."""

    PENDING = "pending"      # Audit queued, not yet started
    RUNNING = "running"      # Audit in progress
    COMPLETED = "completed"  # Report produced
    FAILED = "failed"        # Navigation failed or the worker crashed


class AuditRun(Base):
    """
    One audit of one URL.

    Holds the full JSON report once the run completes, plus one
    CategoryResult row per scoring category for quick filtering.
    """

    __tablename__ = "audit_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    url: Mapped[str] = mapped_column(String(2048), nullable=False, index=True)

    status: Mapped[AuditStatus] = mapped_column(
        Enum(AuditStatus),
        default=AuditStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Run configuration (budget, overrides, screenshot toggle)
    options: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    overall_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    grade: Mapped[str | None] = mapped_column(String(1), nullable=True)

    # Complete report document as produced by the formatter
    report: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    # Set when the run failed before producing a report
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    categories: Mapped[list["CategoryResult"]] = relationship(
        back_populates="audit",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class CategoryResult(Base):
    """Score, grade and issue count of one category in one audit."""

    __tablename__ = "category_results"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    audit_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("audit_runs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # performance, accessibility, seo, best_practices, pwa
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    grade: Mapped[str] = mapped_column(String(1), nullable=False)
    issue_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    missing_metrics: Mapped[list | None] = mapped_column(JSONB, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    audit: Mapped["AuditRun"] = relationship(back_populates="categories")
