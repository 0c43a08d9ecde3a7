import pytest_asyncio

from society.database.core import create_engine, create_session_factory, init_models
from society.database.models import Tower, Flat, User, Role, PaymentStatus
from society.schemas.caller import Caller


@pytest_asyncio.fixture
async def session_factory():
    # Use in-memory SQLite for tests
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await init_models(engine)

    yield create_session_factory(engine)

    await engine.dispose()


class SocietyFixture:
    def __init__(self, admin: Caller, guard: Caller, resident_a: Caller, resident_b: Caller):
        self.admin = admin
        self.guard = guard
        self.resident_a = resident_a
        self.resident_b = resident_b


@pytest_asyncio.fixture
async def society(session_factory):
    """Two towers, three flats and one user per role (two residents)."""
    async with session_factory() as session:
        session.add_all([Tower(id="A", name="Tower A"), Tower(id="B", name="Tower B")])
        await session.flush()

        session.add_all([
            Flat(id="A-101", tower_id="A", floor=1, flat_number=1, owner_name="Rahul Sharma",
                 maintenance_status=PaymentStatus.unpaid.value),
            Flat(id="A-102", tower_id="A", floor=1, flat_number=2, owner_name="Priya Deshmukh",
                 maintenance_status=PaymentStatus.unpaid.value),
            Flat(id="B-204", tower_id="B", floor=2, flat_number=4, owner_name="Pooja Verma",
                 maintenance_status=PaymentStatus.unpaid.value),
        ])
        await session.flush()

        admin = User(username="admin", name="System Admin", role=Role.admin.value)
        guard = User(username="security", name="Gate Security", role=Role.security.value)
        res_a = User(username="resident", name="Rahul Sharma", role=Role.resident.value, flat_id="A-101")
        res_b = User(username="res-b204", name="Pooja Verma", role=Role.resident.value, flat_id="B-204")
        session.add_all([admin, guard, res_a, res_b])
        await session.commit()

        return SocietyFixture(
            admin=Caller(user_id=admin.id, role=Role.admin),
            guard=Caller(user_id=guard.id, role=Role.security),
            resident_a=Caller(user_id=res_a.id, role=Role.resident, flat_id="A-101"),
            resident_b=Caller(user_id=res_b.id, role=Role.resident, flat_id="B-204"),
        )
