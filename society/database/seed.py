"""
Demo data for a fresh store: four towers, seven floors of four flats each
(112 flats), one user per role, the current month's bill batch and six months
of maintenance expenses.

Unit 3 on every floor starts Unpaid, every other flat Paid; the seeded bills
carry the same status as their flat. Seeded users have no credential, the auth
collaborator sets it.
"""
import logging
from datetime import date
from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from society.database.models import Tower, Flat, User, Bill, BillingCycle, Expense, PaymentStatus, Role
from society.services.flat_service import flat_code

TOWERS = ("A", "B", "C", "D")
FLOORS = 7
UNITS_PER_FLOOR = 4
UNPAID_UNIT = 3

# username, role, flat, name, email
USERS = [
    ("admin", Role.admin, None, "System Admin", "admin@towertech.com"),
    ("security", Role.security, None, "Gate Security", "security@towertech.com"),
    ("resident", Role.resident, "A-101", "Rahul Sharma", "rahul@example.com"),
    ("res-b101", Role.resident, "B-101", "Rohan Kulkarni", "rohan@example.com"),
]

BILL_AMOUNT = 1500
BILL_DUE_DAY = 10

EXPENSE_MONTHS = [date(2025, 9, 1), date(2025, 10, 1), date(2025, 11, 1),
                  date(2025, 12, 1), date(2026, 1, 1), date(2026, 2, 1)]
BASE_EXPENSE = 120000
EXPENSE_STEP = 5000


def seed_status(unit: int) -> PaymentStatus:
    return PaymentStatus.unpaid if unit == UNPAID_UNIT else PaymentStatus.paid


async def seed_society(session: AsyncSession, today: Optional[date] = None) -> bool:
    """Populate an empty store. Returns False when towers already exist."""
    count = await session.scalar(select(func.count(Tower.id)))
    if count:
        logging.info("Store already seeded, skipping")
        return False

    today = today or date.today()

    for tower_id in TOWERS:
        session.add(Tower(id=tower_id, name=f"Tower {tower_id}"))
    await session.flush()

    flats = []
    for tower_id in TOWERS:
        for floor in range(1, FLOORS + 1):
            for unit in range(1, UNITS_PER_FLOOR + 1):
                code = flat_code(tower_id, floor, unit)
                flats.append(Flat(
                    id=code,
                    tower_id=tower_id,
                    floor=floor,
                    flat_number=unit,
                    owner_name=f"Owner {code}",
                    maintenance_status=seed_status(unit).value
                ))
    session.add_all(flats)
    await session.flush()

    users = [
        User(username=username, password=None, role=role.value, flat_id=flat_id, name=name, email=email)
        for username, role, flat_id, name, email in USERS
    ]
    session.add_all(users)
    await session.flush()

    # Current month's batch, reconciled with the flat statuses above
    cycle = BillingCycle(
        label=f"{today:%B %Y}",
        amount=BILL_AMOUNT,
        due_date=today.replace(day=BILL_DUE_DAY),
        created_by=users[0].id
    )
    session.add(cycle)
    await session.flush()

    session.add_all([
        Bill(
            flat_id=flat.id,
            amount=BILL_AMOUNT,
            cycle_label=cycle.label,
            cycle_id=cycle.id,
            due_date=cycle.due_date,
            status=flat.maintenance_status
        )
        for flat in flats
    ])

    for i, month in enumerate(EXPENSE_MONTHS):
        session.add(Expense(
            category="Maintenance",
            amount=BASE_EXPENSE + i * EXPENSE_STEP,
            expense_date=month,
            description=f"Monthly operational costs for {month:%Y-%m}"
        ))

    await session.commit()
    logging.info(
        f"Seeded {len(TOWERS)} towers, {len(flats)} flats, {len(users)} users, "
        f"{len(flats)} bills for '{cycle.label}', {len(EXPENSE_MONTHS)} expenses"
    )
    return True
