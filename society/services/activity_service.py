from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from society.database.models import ActivityLog


def log_activity(session: AsyncSession, user_id: Optional[int], action: str, details: str) -> ActivityLog:
    """
    Append an activity entry to the caller's unit of work.
    The entry is committed (or rolled back) together with the change it describes.
    """
    entry = ActivityLog(user_id=user_id, action=action, details=details)
    session.add(entry)
    return entry


class ActivityService:
    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def recent_activity(self, limit: int = 50) -> List[ActivityLog]:
        """Latest entries first, with the acting user loaded for display."""
        async with self._sessions() as session:
            stmt = (
                select(ActivityLog)
                .options(selectinload(ActivityLog.user))
                .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
                .limit(limit)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())
