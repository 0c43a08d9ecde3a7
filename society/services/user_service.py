"""
User Service - residents, security staff and admins.

The password column holds whatever credential the auth collaborator hands in
(already hashed); this module never inspects it.
"""
import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import User, Role, Flat
from society.services.activity_service import log_activity
from society.services.errors import NotFound, DuplicateUsername, ValidationFailure


class UserService:
    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def create_user(
        self,
        username: str,
        password: Optional[str],
        name: str,
        email: Optional[str] = None,
        role: Role = Role.resident,
        flat_id: Optional[str] = None
    ) -> User:
        role = Role(role)
        if role == Role.resident and not flat_id:
            raise ValidationFailure("Residents must be linked to a flat")

        async with self._sessions() as session:
            try:
                async with session.begin():
                    if flat_id and not await session.get(Flat, flat_id):
                        raise NotFound("Flat", flat_id)

                    user = User(
                        username=username,
                        password=password,
                        name=name,
                        email=email,
                        role=role.value,
                        flat_id=flat_id
                    )
                    session.add(user)
                    await session.flush()
                    log_activity(session, user.id, "REGISTER", "New user registered")
            except IntegrityError as e:
                raise DuplicateUsername(username) from e

        logging.info(f"User {user.id} ({username}) registered as {role.value}")
        return user

    async def get_user(self, user_id: int) -> User:
        async with self._sessions() as session:
            user = await session.get(User, user_id)
            if not user:
                raise NotFound("User", user_id)
            return user

    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with self._sessions() as session:
            stmt = select(User).where(User.username == username)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()
