from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.config import config
from society.database.models import (
    Flat, Bill, Complaint, Visitor, Expense,
    PaymentStatus, ComplaintStatus, VisitorStatus
)

INSUFFICIENT_DATA = "Insufficient data"


class SocietyStats:
    def __init__(self, total_flats, paid_flats, pending_complaints, active_visitors, total_collected, total_pending):
        self.total_flats = int(total_flats or 0)
        self.paid_flats = int(paid_flats or 0)
        self.pending_complaints = int(pending_complaints or 0)
        self.active_visitors = int(active_visitors or 0)
        self.total_collected = int(total_collected or 0)
        self.total_pending = int(total_pending or 0)


class BudgetPrediction:
    """
    Result of the two-point expense trend heuristic.

    This is not a forecast: growth is the percentage change between the two
    latest expenses and confidence is a fixed display value.
    """
    def __init__(
        self,
        suggestion: str,
        growth: float = 0.0,
        confidence: Optional[float] = None,
        recent_expense: Optional[int] = None,
        previous_expense: Optional[int] = None
    ):
        self.suggestion = suggestion
        self.growth = growth
        self.confidence = confidence
        self.recent_expense = recent_expense
        self.previous_expense = previous_expense

    @property
    def insufficient_data(self) -> bool:
        return self.recent_expense is None


def suggest_fee_change(growth: float) -> str:
    if growth > 10:
        return f"Expenses rose >10%. Suggest increasing maintenance by ₹{config.LARGE_FEE_INCREASE}."
    if growth > 5:
        return f"Expenses rising steadily. Consider a ₹{config.SMALL_FEE_INCREASE} increase next quarter."
    return "Maintain current maintenance fee."


class StatsReporter:
    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def compute_stats(self) -> SocietyStats:
        """Dashboard counters. Read-only; an empty store yields zeros."""
        async with self._sessions() as session:
            total_flats = await session.scalar(select(func.count(Flat.id)))
            paid_flats = await session.scalar(
                select(func.count(Flat.id)).where(Flat.maintenance_status == PaymentStatus.paid.value)
            )
            pending_complaints = await session.scalar(
                select(func.count(Complaint.id)).where(Complaint.status != ComplaintStatus.resolved.value)
            )
            active_visitors = await session.scalar(
                select(func.count(Visitor.id)).where(Visitor.status == VisitorStatus.inside.value)
            )
            total_collected = await session.scalar(
                select(func.coalesce(func.sum(Bill.amount), 0)).where(Bill.status == PaymentStatus.paid.value)
            )
            total_pending = await session.scalar(
                select(func.coalesce(func.sum(Bill.amount), 0)).where(Bill.status == PaymentStatus.unpaid.value)
            )

        return SocietyStats(
            total_flats, paid_flats, pending_complaints,
            active_visitors, total_collected, total_pending
        )

    async def predict_budget(self) -> BudgetPrediction:
        """
        Compare the two latest expenses and map the growth to a fee suggestion:
        above 10% a larger increase, above 5% a smaller one, otherwise no change.
        """
        async with self._sessions() as session:
            stmt = (
                select(Expense.amount)
                .order_by(Expense.expense_date.desc(), Expense.id.desc())
                .limit(2)
            )
            amounts = list((await session.execute(stmt)).scalars().all())

        # A zero baseline has no meaningful percentage change
        if len(amounts) < 2 or not amounts[1]:
            return BudgetPrediction(INSUFFICIENT_DATA)

        recent, previous = amounts
        growth = (recent - previous) / previous * 100

        return BudgetPrediction(
            suggestion=suggest_fee_change(growth),
            growth=round(growth, 2),
            confidence=config.PREDICTION_CONFIDENCE,
            recent_expense=recent,
            previous_expense=previous
        )
