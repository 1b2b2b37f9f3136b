from __future__ import annotations

from typing import Any, Optional, Sequence

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from zhelper.db.models import Procurement
from zhelper.domain.entities.page import PageRequest
from zhelper.errors import ConflictError
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


class ProcurementRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, procurement_id: int) -> Optional[Procurement]:
        log.debug("repo.procurement.get id=%s", procurement_id)
        return await self._session.get(Procurement, procurement_id)

    async def add(self, entity: Procurement) -> Procurement:
        log.info("repo.procurement.insert uin=%s fz_number=%s", entity.uin, entity.fz_number)
        self._session.add(entity)
        await self._flush(entity)
        await self._session.refresh(entity)
        return entity

    async def update(self, entity: Procurement) -> Procurement:
        log.info("repo.procurement.update id=%s uin=%s", entity.id, entity.uin)
        await self._flush(entity)
        await self._session.refresh(entity)
        return entity

    async def remove(self, entity: Procurement) -> None:
        log.info("repo.procurement.delete id=%s", entity.id)
        await self._session.delete(entity)
        await self._session.flush()

    async def find_by_uin(self, uin: str, fz_number: Optional[int] = None) -> Optional[Procurement]:
        stmt = select(Procurement).where(Procurement.uin == uin)
        if fz_number is not None:
            stmt = stmt.where(Procurement.fz_number == fz_number)
        stmt = stmt.order_by(Procurement.id).limit(1)
        return (await self._session.execute(stmt)).scalars().first()

    async def find_all_by_fz_number(self, fz_number: int) -> list[Procurement]:
        log.info("repo.procurement.find_by_fz_number fz_number=%s", fz_number)
        stmt = select(Procurement).where(Procurement.fz_number == fz_number).order_by(Procurement.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def find_page(
        self,
        *,
        criteria: Sequence[ColumnElement[Any]] = (),
        pageable: PageRequest,
    ) -> tuple[list[Procurement], int]:
        log.info(
            "repo.procurement.list page=%s size=%s criteria=%s",
            pageable.page,
            pageable.size,
            len(criteria),
        )
        stmt = (
            select(Procurement)
            .where(*criteria)
            .order_by(Procurement.id)
            .offset(pageable.offset)
            .limit(pageable.size)
        )
        items = list((await self._session.execute(stmt)).scalars().all())
        count_stmt = select(func.count()).select_from(Procurement).where(*criteria)
        total = (await self._session.execute(count_stmt)).scalar_one()
        return items, int(total)

    async def _flush(self, entity: Procurement) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            log.info(
                "repo.procurement.conflict uin=%s fz_number=%s error=%s",
                entity.uin,
                entity.fz_number,
                str(e.orig),
            )
            raise ConflictError(
                f"procurement with uin {entity.uin} and fz number {entity.fz_number} already exists"
            ) from e
