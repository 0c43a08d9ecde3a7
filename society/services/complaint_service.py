import logging
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import Complaint, ComplaintCategory, ComplaintStatus
from society.schemas.caller import Caller
from society.services.activity_service import log_activity
from society.services.errors import NotFound, ValidationFailure, InvalidTransition

# Complaints only move forward: Pending -> In Progress -> Resolved
STATUS_ORDER = {
    ComplaintStatus.pending: 0,
    ComplaintStatus.in_progress: 1,
    ComplaintStatus.resolved: 2,
}


class ComplaintService:
    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def raise_complaint(
        self,
        caller: Caller,
        title: str,
        description: Optional[str],
        category: ComplaintCategory = ComplaintCategory.other
    ) -> Complaint:
        if not caller.flat_id:
            raise ValidationFailure("Complaint requires a flat")

        async with self._sessions() as session:
            async with session.begin():
                complaint = Complaint(
                    flat_id=caller.flat_id,
                    user_id=caller.user_id,
                    title=title,
                    description=description,
                    category=ComplaintCategory(category).value,
                    status=ComplaintStatus.pending.value
                )
                session.add(complaint)
                log_activity(session, caller.user_id, "RAISE_COMPLAINT", f"Raised complaint: {title}")

        logging.info(f"Flat {caller.flat_id} raised complaint {complaint.id} ({title})")
        return complaint

    async def update_status(self, caller: Caller, complaint_id: int, status: ComplaintStatus) -> Complaint:
        """Advance a complaint. Moving backwards raises InvalidTransition; same status is a no-op."""
        status = ComplaintStatus(status)

        async with self._sessions() as session:
            async with session.begin():
                complaint = (await session.execute(
                    select(Complaint).where(Complaint.id == complaint_id).with_for_update()
                )).scalar_one_or_none()
                if not complaint:
                    raise NotFound("Complaint", complaint_id)

                current = ComplaintStatus(complaint.status)
                if STATUS_ORDER[status] < STATUS_ORDER[current]:
                    raise InvalidTransition(current.value, status.value)
                if status == current:
                    return complaint

                complaint.status = status.value
                log_activity(
                    session, caller.user_id, "UPDATE_COMPLAINT",
                    f"Complaint {complaint_id}: {current.value} -> {status.value}"
                )

        logging.info(f"Complaint {complaint_id} moved to {status.value} by user {caller.user_id}")
        return complaint

    async def list_complaints(self, flat_id: Optional[str] = None) -> List[Complaint]:
        async with self._sessions() as session:
            stmt = select(Complaint).order_by(Complaint.created_at.desc(), Complaint.id.desc())
            if flat_id:
                stmt = stmt.where(Complaint.flat_id == flat_id)
            result = await session.execute(stmt)
            return list(result.scalars().all())
