"""
Notice board: alerts (optionally scoped to a tower) and community events.
Both are immutable once posted.
"""
import logging
from datetime import date
from typing import Optional, List
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import Alert, Event, Severity, Tower, ALL_TOWERS
from society.schemas.caller import Caller
from society.services.activity_service import log_activity
from society.services.errors import NotFound


class NoticeService:
    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def create_alert(
        self,
        caller: Caller,
        title: str,
        message: str,
        severity: Severity = Severity.low,
        tower: str = ALL_TOWERS
    ) -> Alert:
        async with self._sessions() as session:
            async with session.begin():
                if tower != ALL_TOWERS and not await session.get(Tower, tower):
                    raise NotFound("Tower", tower)

                alert = Alert(tower=tower, title=title, message=message, severity=Severity(severity).value)
                session.add(alert)
                log_activity(session, caller.user_id, "CREATE_ALERT", f"Created alert: {title}")

        logging.info(f"Alert {alert.id} posted to {tower} ({alert.severity})")
        return alert

    async def list_alerts(self, tower: Optional[str] = None, limit: Optional[int] = None) -> List[Alert]:
        """Alerts for a tower plus society-wide ones; all alerts when tower is None."""
        async with self._sessions() as session:
            stmt = select(Alert).order_by(Alert.created_at.desc(), Alert.id.desc())
            if tower and tower != ALL_TOWERS:
                stmt = stmt.where(or_(Alert.tower == tower, Alert.tower == ALL_TOWERS))
            elif tower == ALL_TOWERS:
                stmt = stmt.where(Alert.tower == ALL_TOWERS)
            if limit:
                stmt = stmt.limit(limit)
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def create_event(self, caller: Caller, title: str, description: Optional[str], event_date: date) -> Event:
        async with self._sessions() as session:
            async with session.begin():
                event = Event(title=title, description=description, event_date=event_date)
                session.add(event)
                log_activity(session, caller.user_id, "CREATE_EVENT", f"Created event: {title}")

        logging.info(f"Event {event.id} scheduled for {event_date}")
        return event

    async def list_events(self) -> List[Event]:
        """Events in calendar order."""
        async with self._sessions() as session:
            stmt = select(Event).order_by(Event.event_date.asc(), Event.id.asc())
            result = await session.execute(stmt)
            return list(result.scalars().all())
