from typing import List
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import Flat, Bill, Alert, Visitor, Complaint, ALL_TOWERS
from society.services.errors import NotFound


class ResidentDashboard:
    def __init__(self, flat: Flat, bills: List[Bill], alerts: List[Alert], visitors: List[Visitor], complaints: List[Complaint]):
        self.flat = flat
        self.bills = bills
        self.alerts = alerts
        self.visitors = visitors
        self.complaints = complaints


class DashboardService:
    def __init__(self, session_factory: async_sessionmaker, alert_limit: int = 5, visitor_limit: int = 10):
        self._sessions = session_factory
        self.alert_limit = alert_limit
        self.visitor_limit = visitor_limit

    async def resident_dashboard(self, flat_id: str) -> ResidentDashboard:
        """Everything a resident sees on login, read in one session."""
        async with self._sessions() as session:
            flat = await session.get(Flat, flat_id)
            if not flat:
                raise NotFound("Flat", flat_id)

            bills = await session.execute(
                select(Bill).where(Bill.flat_id == flat_id).order_by(Bill.id.desc())
            )
            alerts = await session.execute(
                select(Alert)
                .where(or_(Alert.tower == flat.tower_id, Alert.tower == ALL_TOWERS))
                .order_by(Alert.created_at.desc(), Alert.id.desc())
                .limit(self.alert_limit)
            )
            visitors = await session.execute(
                select(Visitor)
                .where(Visitor.flat_id == flat_id)
                .order_by(Visitor.entry_time.desc(), Visitor.id.desc())
                .limit(self.visitor_limit)
            )
            complaints = await session.execute(
                select(Complaint)
                .where(Complaint.flat_id == flat_id)
                .order_by(Complaint.created_at.desc(), Complaint.id.desc())
            )

            return ResidentDashboard(
                flat=flat,
                bills=list(bills.scalars().all()),
                alerts=list(alerts.scalars().all()),
                visitors=list(visitors.scalars().all()),
                complaints=list(complaints.scalars().all())
            )
