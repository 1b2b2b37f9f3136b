"""
Procurement data manager.

Service layer over `ProcurementRepository`. Failures are structured so the
HTTP boundary can tell them apart:

- `NullInputError`        required argument was None (400)
- `NotFoundError`         lookup target is absent (404)
- `NonExistingDeleteError` delete target is absent, carries the id (404)
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from zhelper.db.models import PROCUREMENT_REPLACEABLE_FIELDS, Procurement
from zhelper.domain.entities.page import Page, PageRequest
from zhelper.errors import DataManagerError, NonExistingDeleteError, NotFoundError, NullInputError
from zhelper.repositories.procurement_repository import ProcurementRepository
from zhelper.utils.time_utils import start_of_day_utc
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


class ProcurementDataManager:
    def __init__(self, repo: ProcurementRepository):
        self._repo = repo

    async def save(self, record: Procurement) -> Procurement:
        """
        Insert when `record.id` is None, otherwise replace every column of the
        stored row with the values of `record`.
        """
        if record is None:
            raise NullInputError()
        if record.id is None:
            return await self._repo.add(record)

        existing = await self._repo.get(record.id)
        if existing is None:
            log.info("procurement.save not_found id=%s", record.id)
            raise NotFoundError(DataManagerError.NON_EXISTING_LOAD_OR_DELETE_EXCEPTION % record.id)
        if existing is not record:
            for name in PROCUREMENT_REPLACEABLE_FIELDS:
                setattr(existing, name, getattr(record, name))
            if record.created_at is not None:
                existing.created_at = record.created_at
        return await self._repo.update(existing)

    async def load_by_id(self, procurement_id: Optional[int]) -> Procurement:
        if procurement_id is None:
            log.info("procurement.load_by_id null_input")
            raise NullInputError()
        entity = await self._repo.get(procurement_id)
        if entity is None:
            log.info("procurement.load_by_id not_found id=%s", procurement_id)
            raise NotFoundError(DataManagerError.NON_EXISTING_LOAD_OR_DELETE_EXCEPTION % procurement_id)
        return entity

    async def load_by_uin(self, uin: Optional[str], fz_number: Optional[int] = None) -> Procurement:
        if not uin:
            raise NullInputError()
        entity = await self._repo.find_by_uin(uin, fz_number)
        if entity is None:
            raise NotFoundError(f"Procurement with uin {uin} does not exist")
        return entity

    async def load_all(self, pageable: PageRequest) -> Page[Procurement]:
        return await self._page((), pageable)

    async def load_by_id_list(self, ids: Optional[Iterable[int]], pageable: PageRequest) -> Page[Procurement]:
        if ids is None:
            raise NullInputError()
        id_set = {int(i) for i in ids}
        if not id_set:
            return Page.empty(pageable)
        return await self._page((Procurement.id.in_(id_set),), pageable)

    async def load_list_by_fz_number(self, fz_number: Optional[int]) -> list[Procurement]:
        if fz_number is None:
            raise NullInputError()
        return await self._repo.find_all_by_fz_number(fz_number)

    async def load_page_by_fz_number(self, fz_number: Optional[int], pageable: PageRequest) -> Page[Procurement]:
        if fz_number is None:
            raise NullInputError()
        return await self._page((Procurement.fz_number == fz_number,), pageable)

    async def load_created_before_date(
        self, before: Optional[date | datetime], pageable: PageRequest
    ) -> Page[Procurement]:
        if before is None:
            raise NullInputError()
        cutoff = start_of_day_utc(before)
        return await self._page((Procurement.created_at < cutoff,), pageable)

    async def delete(self, record: Optional[Procurement]) -> None:
        if record is None or record.id is None:
            raise NullInputError()
        existing = await self._repo.get(record.id)
        if existing is None:
            log.info("procurement.delete not_found id=%s", record.id)
            raise NonExistingDeleteError(record.id)
        await self._repo.remove(existing)

    async def delete_by_id(self, procurement_id: Optional[int]) -> None:
        if procurement_id is None:
            raise NullInputError()
        existing = await self._repo.get(procurement_id)
        if existing is None:
            log.info("procurement.delete_by_id not_found id=%s", procurement_id)
            raise NonExistingDeleteError(procurement_id)
        await self._repo.remove(existing)

    async def _page(self, criteria, pageable: PageRequest) -> Page[Procurement]:
        items, total = await self._repo.find_page(criteria=criteria, pageable=pageable)
        return Page(items=items, total=total, page=pageable.page, size=pageable.size)
