import pytest

from society.database.models import VisitorStatus
from society.services.visitor_service import VisitorLedger
from society.services.errors import NotFound


@pytest.mark.asyncio
async def test_entry_then_exit(session_factory, society):
    ledger = VisitorLedger(session_factory)

    visitor = await ledger.record_entry(society.guard, "Courier", "A", "A-101")
    assert visitor.status == VisitorStatus.inside.value
    assert visitor.exit_time is None
    assert visitor.entry_time is not None

    left = await ledger.record_exit(society.guard, visitor.id)
    assert left.status == VisitorStatus.left.value
    assert left.exit_time is not None
    assert left.exit_time >= left.entry_time


@pytest.mark.asyncio
async def test_exit_time_is_set_once(session_factory, society):
    ledger = VisitorLedger(session_factory)
    visitor = await ledger.record_entry(society.guard, "Plumber", "B", "B-204")

    first = await ledger.record_exit(society.guard, visitor.id)
    second = await ledger.record_exit(society.guard, visitor.id)

    assert second.status == VisitorStatus.left.value
    assert second.exit_time == first.exit_time


@pytest.mark.asyncio
async def test_unknown_visitor_or_flat(session_factory, society):
    ledger = VisitorLedger(session_factory)

    with pytest.raises(NotFound):
        await ledger.record_exit(society.guard, 4242)
    with pytest.raises(NotFound):
        await ledger.record_entry(society.guard, "Guest", "C", "C-301")


@pytest.mark.asyncio
async def test_list_active_newest_first(session_factory, society):
    ledger = VisitorLedger(session_factory)
    first = await ledger.record_entry(society.guard, "Guest 1", "A", "A-101")
    second = await ledger.record_entry(society.guard, "Guest 2", "A", "A-102")
    third = await ledger.record_entry(society.guard, "Guest 3", "B", "B-204")
    await ledger.record_exit(society.guard, second.id)

    active = await ledger.list_active()

    assert [v.id for v in active] == [third.id, first.id]
    assert len(await ledger.list_all()) == 3
    assert [v.name for v in await ledger.list_for_flat("A-102")] == ["Guest 2"]
