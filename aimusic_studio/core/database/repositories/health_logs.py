"""Provider health log repository."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.health_logs import ApiHealthLog
from .base import AsyncBaseRepository


class HealthLogRepository(AsyncBaseRepository[ApiHealthLog]):
    """Repository for ``api_health_logs``."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ApiHealthLog)

    async def add_many(self, logs: List[ApiHealthLog]) -> None:
        self.session.add_all(logs)
        await self.session.commit()

    async def list_recent(self, *, provider: Optional[str] = None, limit: int = 50) -> List[ApiHealthLog]:
        stmt = select(ApiHealthLog)
        if provider:
            stmt = stmt.where(ApiHealthLog.provider == provider)
        stmt = stmt.order_by(ApiHealthLog.checked_at.desc()).limit(limit)
        return list((await self.session.execute(stmt)).scalars().all())
