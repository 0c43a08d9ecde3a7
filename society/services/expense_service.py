import logging
from datetime import date
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import Expense
from society.services.errors import ValidationFailure


class ExpenseService:
    """Append-only expense ledger feeding the budget heuristic."""

    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def record_expense(self, category: str, amount: int, expense_date: date, description: Optional[str] = None) -> Expense:
        if amount < 0:
            raise ValidationFailure("Expense amount cannot be negative")

        async with self._sessions() as session:
            expense = Expense(category=category, amount=amount, expense_date=expense_date, description=description)
            session.add(expense)
            await session.commit()

        logging.info(f"Expense recorded: {category} {amount} on {expense_date}")
        return expense

    async def list_expenses(self) -> List[Expense]:
        async with self._sessions() as session:
            stmt = select(Expense).order_by(Expense.expense_date.desc(), Expense.id.desc())
            result = await session.execute(stmt)
            return list(result.scalars().all())
