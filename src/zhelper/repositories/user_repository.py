from __future__ import annotations

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from zhelper.db.models import User
from zhelper.errors import ConflictError
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def username_or_email_taken(self, username: str, email: str) -> bool:
        stmt = select(User.id).where(or_(User.username == username, User.email == email)).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def insert(self, user: User) -> User:
        log.info("repo.user.insert username=%s roles=%s", user.username, user.roles)
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictError("username or email already registered") from e
        await self._session.refresh(user)
        return user

    async def list(self, *, skip: int, limit: int) -> list[User]:
        stmt = select(User).order_by(User.id).offset(skip).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())
