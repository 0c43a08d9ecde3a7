import pytest
from datetime import date
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from society.database.models import Flat, Tower, User, Bill, BillingCycle, PaymentStatus, Role
from society.database.seed import seed_society
from society.services.flat_service import FlatService, flat_code, parse_flat_code
from society.services.errors import NotFound, ValidationFailure
from society.services.stats_service import StatsReporter


def test_flat_code():
    assert flat_code("A", 1, 1) == "A-101"
    assert flat_code("D", 7, 4) == "D-704"
    assert flat_code("B", 12, 3) == "B-1203"
    assert parse_flat_code("A-101") == ("A", 1, 1)
    assert parse_flat_code("B-1203") == ("B", 12, 3)

    with pytest.raises(ValidationFailure):
        flat_code("A", 1, 100)
    with pytest.raises(ValidationFailure):
        parse_flat_code("A101")
    with pytest.raises(ValidationFailure):
        flat_code("A", 0, 1)
    with pytest.raises(ValidationFailure):
        parse_flat_code("A-001")
    with pytest.raises(ValidationFailure):
        parse_flat_code("A-100")


@pytest.mark.asyncio
async def test_create_flat(session_factory):
    flats = FlatService(session_factory)
    await flats.create_tower("C")

    flat = await flats.create_flat("C-305", "C", owner_name="Owner C-305")

    assert flat.floor == 3
    assert flat.flat_number == 5
    assert [f.id for f in await flats.list_flats("C")] == ["C-305"]
    assert (await flats.get_flat("C-305")).owner_name == "Owner C-305"


@pytest.mark.asyncio
async def test_create_flat_rejects_bad_input(session_factory):
    flats = FlatService(session_factory)
    await flats.create_tower("A")
    await flats.create_flat("A-101", "A")

    with pytest.raises(ValidationFailure):
        await flats.create_flat("B-101", "A")
    with pytest.raises(NotFound):
        await flats.create_flat("Z-101", "Z")
    with pytest.raises(ValidationFailure):
        await flats.create_flat("A-101", "A")
    with pytest.raises(NotFound):
        await flats.get_flat("A-999")


@pytest.mark.asyncio
async def test_store_rejects_flat_outside_its_tower(session_factory):
    async with session_factory() as session:
        session.add_all([Tower(id="A", name="Tower A"), Tower(id="B", name="Tower B")])
        await session.commit()

    async with session_factory() as session:
        session.add(Flat(id="A-101", tower_id="B", floor=1, flat_number=1))
        with pytest.raises(IntegrityError):
            await session.commit()


@pytest.mark.asyncio
async def test_seed_is_applied_once(session_factory):
    async with session_factory() as session:
        assert await seed_society(session, today=date(2026, 3, 18)) is True
    async with session_factory() as session:
        assert await seed_society(session) is False

    flats = FlatService(session_factory)
    assert [t.id for t in await flats.list_towers()] == ["A", "B", "C", "D"]
    all_flats = await flats.list_flats()
    assert len(all_flats) == 112
    assert all_flats[0].id == "A-101"
    assert all_flats[0].owner_name == "Owner A-101"

    # Unit 3 on every floor owes maintenance, everyone else has paid
    unpaid = [f.id for f in all_flats if f.maintenance_status == PaymentStatus.unpaid.value]
    assert len(unpaid) == 28
    assert all(f.endswith("03") for f in unpaid)

    async with session_factory() as session:
        users = (await session.execute(select(User).order_by(User.id))).scalars().all()
        assert [(u.username, u.role, u.flat_id) for u in users] == [
            ("admin", Role.admin.value, None),
            ("security", Role.security.value, None),
            ("resident", Role.resident.value, "A-101"),
            ("res-b101", Role.resident.value, "B-101"),
        ]
        assert all(u.password is None for u in users)

        cycle = (await session.execute(select(BillingCycle))).scalar_one()
        assert cycle.label == "March 2026"
        assert cycle.due_date == date(2026, 3, 10)
        assert cycle.created_by == users[0].id

        bills = (await session.execute(select(Bill))).scalars().all()
        assert len(bills) == 112
        status_by_flat = {f.id: f.maintenance_status for f in all_flats}
        assert all(b.status == status_by_flat[b.flat_id] for b in bills)
        assert all(b.cycle_id == cycle.id and b.cycle_label == "March 2026" for b in bills)

    stats = await StatsReporter(session_factory).compute_stats()
    assert stats.paid_flats == 84
    assert stats.total_collected == 84 * 1500
    assert stats.total_pending == 28 * 1500
