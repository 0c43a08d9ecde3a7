import asyncio
import pytest
from datetime import date
from sqlalchemy import select, func

from society.database.core import create_engine, create_session_factory, init_models
from society.database.models import Bill, Flat, Tower, ActivityLog, BillingCycle, PaymentStatus, User, Role
from society.database.seed import seed_society
from society.schemas.caller import Caller
from society.services.billing_service import BillingService
from society.services.errors import DuplicateCycle, NotFound, MismatchedReference, ValidationFailure


async def _bill_count(session_factory, cycle_label: str) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count(Bill.id)).where(Bill.cycle_label == cycle_label))


@pytest.mark.asyncio
async def test_generate_bills_for_every_flat(session_factory, society):
    """One Unpaid bill per flat with the requested amount and due date"""
    billing = BillingService(session_factory)

    created = await billing.generate_bills_for_cycle(society.admin, "March 2026", 1500, date(2026, 3, 10))

    assert created == 3
    bills = await billing.list_bills(cycle_label="March 2026")
    assert sorted(b.flat_id for b in bills) == ["A-101", "A-102", "B-204"]
    assert all(b.amount == 1500 for b in bills)
    assert all(b.status == PaymentStatus.unpaid.value for b in bills)
    assert all(b.due_date == date(2026, 3, 10) for b in bills)

    async with session_factory() as session:
        log = (await session.execute(select(ActivityLog).where(ActivityLog.action == "GENERATE_BILLS"))).scalar_one()
        assert log.user_id == society.admin.user_id
        assert "March 2026" in log.details


@pytest.mark.asyncio
async def test_generate_bills_twice_fails_without_doubling(session_factory):
    """Seeded society of 112 flats: second generation for the same cycle is rejected"""
    async with session_factory() as session:
        await seed_society(session, today=date(2026, 2, 1))

    async with session_factory() as session:
        admin = (await session.execute(select(User).where(User.username == "admin"))).scalar_one()
    caller = Caller(user_id=admin.id, role=Role.admin)

    billing = BillingService(session_factory)
    created = await billing.generate_bills_for_cycle(caller, "2026-03", 1500, date(2026, 3, 10))
    assert created == 112

    with pytest.raises(DuplicateCycle):
        await billing.generate_bills_for_cycle(caller, "2026-03", 1500, date(2026, 3, 10))

    assert await _bill_count(session_factory, "2026-03") == 112

    async with session_factory() as session:
        # Seeded "February 2026" batch plus the new one
        cycles = await session.scalar(select(func.count(BillingCycle.id)))
        assert cycles == 2


@pytest.mark.asyncio
async def test_cycle_label_guard_without_bills(session_factory):
    """With no flats no Bill rows exist; the unique cycle label still blocks a second batch"""
    async with session_factory() as session:
        admin = User(username="admin", name="Admin", role=Role.admin.value)
        session.add(admin)
        await session.commit()
    caller = Caller(user_id=admin.id, role=Role.admin)

    billing = BillingService(session_factory)
    assert await billing.generate_bills_for_cycle(caller, "March 2026", 1500, date(2026, 3, 10)) == 0

    with pytest.raises(DuplicateCycle):
        await billing.generate_bills_for_cycle(caller, "March 2026", 1500, date(2026, 3, 10))

    async with session_factory() as session:
        assert await session.scalar(select(func.count(BillingCycle.id))) == 1
        # The rejected attempt left no activity entry behind
        logs = await session.scalar(select(func.count(ActivityLog.id)).where(ActivityLog.action == "GENERATE_BILLS"))
        assert logs == 1


@pytest.mark.asyncio
async def test_concurrent_generation_creates_one_batch(tmp_path):
    """Two racing generations for one label on a file database: exactly one batch lands"""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'society.db'}")
    await init_models(engine)
    factory = create_session_factory(engine)

    try:
        async with factory() as session:
            session.add(Tower(id="A", name="Tower A"))
            await session.flush()
            session.add_all([
                Flat(id="A-101", tower_id="A", floor=1, flat_number=1, maintenance_status=PaymentStatus.unpaid.value),
                Flat(id="A-102", tower_id="A", floor=1, flat_number=2, maintenance_status=PaymentStatus.unpaid.value),
            ])
            admin = User(username="admin", name="Admin", role=Role.admin.value)
            session.add(admin)
            await session.commit()
        caller = Caller(user_id=admin.id, role=Role.admin)

        billing = BillingService(factory)
        results = await asyncio.gather(
            billing.generate_bills_for_cycle(caller, "March 2026", 1500, date(2026, 3, 10)),
            billing.generate_bills_for_cycle(caller, "March 2026", 1500, date(2026, 3, 10)),
            return_exceptions=True
        )

        assert sorted(type(r).__name__ for r in results) == ["DuplicateCycle", "int"]
        assert 2 in results
        assert await _bill_count(factory, "March 2026") == 2
        async with factory() as session:
            assert await session.scalar(select(func.count(BillingCycle.id))) == 1
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_existing_bills_without_cycle_row_block_generation(session_factory, society):
    """Bills carrying the label from another source still count as a batch"""
    async with session_factory() as session:
        session.add(Bill(flat_id="A-101", amount=1500, cycle_label="February 2026",
                         due_date=date(2026, 2, 10), status=PaymentStatus.paid.value))
        await session.commit()

    billing = BillingService(session_factory)
    with pytest.raises(DuplicateCycle):
        await billing.generate_bills_for_cycle(society.admin, "February 2026", 1500, date(2026, 2, 10))

    assert await _bill_count(session_factory, "February 2026") == 1


@pytest.mark.asyncio
async def test_generate_bills_rejects_non_positive_amount(session_factory, society):
    billing = BillingService(session_factory)
    with pytest.raises(ValidationFailure):
        await billing.generate_bills_for_cycle(society.admin, "April 2026", 0, date(2026, 4, 10))
    assert await _bill_count(session_factory, "April 2026") == 0


@pytest.mark.asyncio
async def test_mark_paid_updates_bill_and_flat(session_factory, society):
    billing = BillingService(session_factory)
    await billing.generate_bills_for_cycle(society.admin, "March 2026", 1500, date(2026, 3, 10))
    bill = (await billing.list_bills(flat_id="A-101"))[0]

    paid = await billing.mark_paid(society.admin, "A-101", bill.id)

    assert paid.status == PaymentStatus.paid.value
    async with session_factory() as session:
        flat = await session.get(Flat, "A-101")
        assert flat.maintenance_status == PaymentStatus.paid.value
        other = await session.get(Flat, "A-102")
        assert other.maintenance_status == PaymentStatus.unpaid.value


@pytest.mark.asyncio
async def test_mark_paid_is_idempotent(session_factory, society):
    billing = BillingService(session_factory)
    await billing.generate_bills_for_cycle(society.admin, "March 2026", 1500, date(2026, 3, 10))
    bill = (await billing.list_bills(flat_id="B-204"))[0]

    await billing.mark_paid(society.admin, "B-204", bill.id)
    await billing.mark_paid(society.admin, "B-204", bill.id)

    async with session_factory() as session:
        stored = await session.get(Bill, bill.id)
        assert stored.status == PaymentStatus.paid.value
        flat = await session.get(Flat, "B-204")
        assert flat.maintenance_status == PaymentStatus.paid.value
        logs = await session.scalar(select(func.count(ActivityLog.id)).where(ActivityLog.action == "MARK_PAID"))
        assert logs == 1


@pytest.mark.asyncio
async def test_mark_paid_unknown_rows(session_factory, society):
    billing = BillingService(session_factory)
    await billing.generate_bills_for_cycle(society.admin, "March 2026", 1500, date(2026, 3, 10))
    bill = (await billing.list_bills(flat_id="A-101"))[0]

    with pytest.raises(NotFound):
        await billing.mark_paid(society.admin, "Z-999", bill.id)
    with pytest.raises(NotFound):
        await billing.mark_paid(society.admin, "A-101", 9999)


@pytest.mark.asyncio
async def test_mark_paid_rejects_bill_of_another_flat(session_factory, society):
    billing = BillingService(session_factory, verify_ownership=True)
    await billing.generate_bills_for_cycle(society.admin, "March 2026", 1500, date(2026, 3, 10))
    bill_b = (await billing.list_bills(flat_id="B-204"))[0]

    with pytest.raises(MismatchedReference):
        await billing.mark_paid(society.admin, "A-101", bill_b.id)

    async with session_factory() as session:
        assert (await session.get(Bill, bill_b.id)).status == PaymentStatus.unpaid.value
        assert (await session.get(Flat, "A-101")).maintenance_status == PaymentStatus.unpaid.value


@pytest.mark.asyncio
async def test_mark_paid_trusts_pair_when_verification_disabled(session_factory, society):
    billing = BillingService(session_factory, verify_ownership=False)
    await billing.generate_bills_for_cycle(society.admin, "March 2026", 1500, date(2026, 3, 10))
    bill_b = (await billing.list_bills(flat_id="B-204"))[0]

    await billing.mark_paid(society.admin, "A-101", bill_b.id)

    async with session_factory() as session:
        assert (await session.get(Bill, bill_b.id)).status == PaymentStatus.paid.value
        assert (await session.get(Flat, "A-101")).maintenance_status == PaymentStatus.paid.value
