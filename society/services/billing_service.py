import logging
from datetime import date
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.config import config
from society.database.models import Flat, Bill, BillingCycle, PaymentStatus
from society.schemas.caller import Caller
from society.services.activity_service import log_activity
from society.services.errors import NotFound, DuplicateCycle, MismatchedReference, ValidationFailure


class BillingService:
    def __init__(self, session_factory: async_sessionmaker, verify_ownership: Optional[bool] = None):
        self._sessions = session_factory
        self.verify_ownership = config.VERIFY_BILL_OWNERSHIP if verify_ownership is None else verify_ownership

    # --- Bill Generation ---
    async def generate_bills_for_cycle(
        self,
        caller: Caller,
        cycle_label: str,
        amount: int,
        due_date: date
    ) -> int:
        """
        Create one Unpaid bill per flat for the billing cycle.

        The cycle row, all bills and the activity entry are written in a single
        transaction. The unique cycle label is checked by the database at flush
        time, so two concurrent generations for the same label cannot both commit.

        Returns:
            Number of bills created
        """
        if amount <= 0:
            raise ValidationFailure("Amount must be positive")

        async with self._sessions() as session:
            async with session.begin():
                # Bills carrying this label without a cycle row (seeded or manual) also count
                existing = await session.execute(
                    select(Bill.id).where(Bill.cycle_label == cycle_label).limit(1)
                )
                if existing.scalar_one_or_none() is not None:
                    raise DuplicateCycle(cycle_label)

                cycle = BillingCycle(
                    label=cycle_label,
                    amount=amount,
                    due_date=due_date,
                    created_by=caller.user_id
                )
                session.add(cycle)
                try:
                    await session.flush()
                except IntegrityError as e:
                    raise DuplicateCycle(cycle_label) from e

                flat_ids = (await session.execute(select(Flat.id).order_by(Flat.id))).scalars().all()
                session.add_all([
                    Bill(
                        flat_id=flat_id,
                        amount=amount,
                        cycle_label=cycle_label,
                        cycle_id=cycle.id,
                        due_date=due_date,
                        status=PaymentStatus.unpaid.value
                    )
                    for flat_id in flat_ids
                ])
                log_activity(session, caller.user_id, "GENERATE_BILLS", f"Generated bills for {cycle_label}")

        logging.info(f"Admin {caller.user_id} generated {len(flat_ids)} bills for cycle '{cycle_label}'")
        return len(flat_ids)

    # --- Payment Status ---
    async def mark_paid(self, caller: Caller, flat_id: str, bill_id: int) -> Bill:
        """
        Mark a bill and its flat as Paid.

        Idempotent: a second call with the same arguments leaves the same state
        and does not write another activity entry.
        """
        async with self._sessions() as session:
            async with session.begin():
                # Lock both rows (no-op on SQLite) so concurrent marks serialize
                flat = (await session.execute(
                    select(Flat).where(Flat.id == flat_id).with_for_update()
                )).scalar_one_or_none()
                if not flat:
                    raise NotFound("Flat", flat_id)

                bill = (await session.execute(
                    select(Bill).where(Bill.id == bill_id).with_for_update()
                )).scalar_one_or_none()
                if not bill:
                    raise NotFound("Bill", bill_id)

                if self.verify_ownership and bill.flat_id != flat.id:
                    raise MismatchedReference(bill_id, flat_id)

                if bill.status == PaymentStatus.paid.value and flat.maintenance_status == PaymentStatus.paid.value:
                    logging.info(f"Bill {bill_id} for flat {flat_id} already paid. Skipping.")
                    return bill

                bill.status = PaymentStatus.paid.value
                flat.maintenance_status = PaymentStatus.paid.value
                log_activity(session, caller.user_id, "MARK_PAID", f"Marked bill {bill_id} for flat {flat_id} as paid")

        logging.info(f"Admin {caller.user_id} marked bill {bill_id} for flat {flat_id} as paid")
        return bill

    async def list_bills(self, flat_id: Optional[str] = None, cycle_label: Optional[str] = None) -> List[Bill]:
        """Bills newest first, optionally filtered by flat and/or cycle."""
        async with self._sessions() as session:
            stmt = select(Bill).order_by(Bill.id.desc())
            if flat_id:
                stmt = stmt.where(Bill.flat_id == flat_id)
            if cycle_label:
                stmt = stmt.where(Bill.cycle_label == cycle_label)
            result = await session.execute(stmt)
            return list(result.scalars().all())
