import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import Visitor, VisitorStatus, Flat
from society.schemas.caller import Caller
from society.services.activity_service import log_activity
from society.services.errors import NotFound


def _now() -> datetime:
    return datetime.now(timezone.utc)


class VisitorLedger:
    """Gate register: who came in, for which flat, and whether they are still inside."""

    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def record_entry(self, caller: Caller, name: str, tower: str, flat_id: str) -> Visitor:
        async with self._sessions() as session:
            async with session.begin():
                if not await session.get(Flat, flat_id):
                    raise NotFound("Flat", flat_id)

                visitor = Visitor(
                    name=name,
                    tower=tower,
                    flat_id=flat_id,
                    entry_time=_now(),
                    exit_time=None,
                    status=VisitorStatus.inside.value
                )
                session.add(visitor)
                log_activity(session, caller.user_id, "VISITOR_ENTRY", f"Recorded entry for {name} to {flat_id}")

            await session.refresh(visitor)

        logging.info(f"Visitor {visitor.id} ({name}) entered for flat {flat_id}")
        return visitor

    async def record_exit(self, caller: Caller, visitor_id: int) -> Visitor:
        """
        Close a visit. The exit time is written once; repeating the call
        returns the visitor unchanged.
        """
        async with self._sessions() as session:
            async with session.begin():
                visitor = (await session.execute(
                    select(Visitor).where(Visitor.id == visitor_id).with_for_update()
                )).scalar_one_or_none()
                if not visitor:
                    raise NotFound("Visitor", visitor_id)

                if visitor.status == VisitorStatus.left.value:
                    logging.info(f"Visitor {visitor_id} already checked out. Skipping.")
                    return visitor

                visitor.exit_time = _now()
                visitor.status = VisitorStatus.left.value
                log_activity(session, caller.user_id, "VISITOR_EXIT", f"Recorded exit for visitor ID {visitor_id}")

            await session.refresh(visitor)

        logging.info(f"Visitor {visitor_id} left")
        return visitor

    async def list_active(self) -> List[Visitor]:
        """Visitors still inside, most recent entry first."""
        async with self._sessions() as session:
            stmt = (
                select(Visitor)
                .where(Visitor.status == VisitorStatus.inside.value)
                .order_by(Visitor.entry_time.desc(), Visitor.id.desc())
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def list_all(self) -> List[Visitor]:
        async with self._sessions() as session:
            stmt = select(Visitor).order_by(Visitor.entry_time.desc(), Visitor.id.desc())
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def list_for_flat(self, flat_id: str, limit: int = 10) -> List[Visitor]:
        async with self._sessions() as session:
            stmt = (
                select(Visitor)
                .where(Visitor.flat_id == flat_id)
                .order_by(Visitor.entry_time.desc(), Visitor.id.desc())
                .limit(limit)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())
