"""
Towers and flats.

Flat ids follow the "<Tower>-<Floor><Unit:02>" convention, e.g. "A-101" is
tower A, floor 1, unit 1. The tower prefix must match the flat's tower.
"""
import re
import logging
from typing import Optional, List, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import Tower, Flat, PaymentStatus
from society.services.errors import NotFound, ValidationFailure

FLAT_CODE_RE = re.compile(r"^([A-Z]+)-([1-9]\d*)(\d{2})$")


def flat_code(tower_id: str, floor: int, unit: int) -> str:
    if floor < 1 or not 0 < unit < 100:
        raise ValidationFailure(f"Invalid floor/unit: {floor}/{unit}")
    return f"{tower_id}-{floor}{unit:02d}"


def parse_flat_code(code: str) -> Tuple[str, int, int]:
    """Split 'A-101' into ('A', 1, 1)."""
    match = FLAT_CODE_RE.match(code or "")
    if not match or match.group(3) == "00":
        raise ValidationFailure(f"Invalid flat id: {code!r}")
    return match.group(1), int(match.group(2)), int(match.group(3))


class FlatService:
    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def create_tower(self, tower_id: str, name: Optional[str] = None) -> Tower:
        async with self._sessions() as session:
            if await session.get(Tower, tower_id):
                raise ValidationFailure(f"Tower {tower_id} already exists")
            tower = Tower(id=tower_id, name=name or f"Tower {tower_id}")
            session.add(tower)
            await session.commit()
            return tower

    async def create_flat(
        self,
        flat_id: str,
        tower_id: str,
        owner_name: Optional[str] = None,
        maintenance_status: PaymentStatus = PaymentStatus.unpaid
    ) -> Flat:
        """Create a flat after checking its code against the tower."""
        code_tower, floor, unit = parse_flat_code(flat_id)
        if code_tower != tower_id:
            raise ValidationFailure(f"Flat {flat_id} does not belong to tower {tower_id}")

        async with self._sessions() as session:
            if not await session.get(Tower, tower_id):
                raise NotFound("Tower", tower_id)
            if await session.get(Flat, flat_id):
                raise ValidationFailure(f"Flat {flat_id} already exists")

            flat = Flat(
                id=flat_id,
                tower_id=tower_id,
                floor=floor,
                flat_number=unit,
                owner_name=owner_name,
                maintenance_status=maintenance_status.value
            )
            session.add(flat)
            await session.commit()

        logging.info(f"Flat {flat_id} created in tower {tower_id}")
        return flat

    async def get_flat(self, flat_id: str) -> Flat:
        async with self._sessions() as session:
            flat = await session.get(Flat, flat_id)
            if not flat:
                raise NotFound("Flat", flat_id)
            return flat

    async def list_flats(self, tower_id: Optional[str] = None) -> List[Flat]:
        async with self._sessions() as session:
            stmt = select(Flat).order_by(Flat.tower_id, Flat.floor, Flat.flat_number)
            if tower_id:
                stmt = stmt.where(Flat.tower_id == tower_id)
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def list_towers(self) -> List[Tower]:
        async with self._sessions() as session:
            result = await session.execute(select(Tower).order_by(Tower.id))
            return list(result.scalars().all())
