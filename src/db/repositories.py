"""Repository pattern for audit persistence."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import AuditRun, AuditStatus, CategoryResult


class AuditRunRepository:
    """Handles all AuditRun-related database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, url: str, options: dict | None = None) -> AuditRun:
        """Create a pending audit run."""
        audit = AuditRun(
            url=url,
            status=AuditStatus.PENDING,
            options=options,
        )
        self.session.add(audit)
        await self.session.flush()  # Assigns the ID without committing
        return audit

    async def get_by_id(self, audit_id: uuid.UUID) -> AuditRun | None:
        result = await self.session.execute(
            select(AuditRun).where(AuditRun.id == audit_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(self, limit: int = 20, url: str | None = None) -> list[AuditRun]:
        """Most recent audits first, optionally for a single URL."""
        query = select(AuditRun)
        if url:
            query = query.where(AuditRun.url == url)
        query = query.order_by(AuditRun.created_at.desc()).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())


class CategoryResultRepository:
    """Handles CategoryResult database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def history(self, url: str, category: str, limit: int = 20) -> list[CategoryResult]:
        """Score history of one category for a URL, newest first."""
        result = await self.session.execute(
            select(CategoryResult)
            .join(AuditRun)
            .where(AuditRun.url == url, CategoryResult.category == category)
            .order_by(CategoryResult.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
