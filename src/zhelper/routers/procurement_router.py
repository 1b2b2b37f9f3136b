from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from zhelper.auth.dependencies import get_principal
from zhelper.auth.models import Principal
from zhelper.domain.entities.page import MAX_DB_INT, PageRequest
from zhelper.domain.entities.procurement import MAX_FZ_NUMBER, ProcurementDto, ProcurementOut
from zhelper.errors import ValidationFailure
from zhelper.routers.deps import FzNumber, ProcurementId, get_data_manager, get_page_request
from zhelper.services.procurement_data_manager import ProcurementDataManager
from zhelper.utils.response import success
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/api/v1/procurements", tags=["procurement"])


@router.get("")
async def list_procurements(
    ids: Optional[List[int]] = Query(None),
    fz_number: Optional[int] = Query(None, ge=1, le=MAX_FZ_NUMBER),
    created_before: Optional[date] = Query(None),
    pageable: PageRequest = Depends(get_page_request),
    manager: ProcurementDataManager = Depends(get_data_manager),
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info(
        "procurement.list.start user_id=%s page=%s size=%s ids=%s fz_number=%s created_before=%s",
        principal.user_id,
        pageable.page,
        pageable.size,
        ids,
        fz_number,
        created_before,
    )
    given = {"ids": ids, "fz_number": fz_number, "created_before": created_before}
    filters = [name for name, value in given.items() if value is not None]
    if len(filters) > 1:
        raise ValidationFailure("filters cannot be combined: " + ", ".join(filters))
    if ids is not None:
        if any(i < 1 or i > MAX_DB_INT for i in ids):
            raise ValidationFailure("ids out of range")
        page = await manager.load_by_id_list(ids, pageable)
    elif fz_number is not None:
        page = await manager.load_page_by_fz_number(fz_number, pageable)
    elif created_before is not None:
        page = await manager.load_created_before_date(created_before, pageable)
    else:
        page = await manager.load_all(pageable)
    return success(page.map(ProcurementOut.of).to_dict())


@router.get("/by-fz/{fz_number}")
async def list_by_fz_number(
    fz_number: FzNumber,
    manager: ProcurementDataManager = Depends(get_data_manager),
) -> dict:
    items = await manager.load_list_by_fz_number(fz_number)
    return success([ProcurementOut.of(p) for p in items])


@router.get("/{procurement_id}")
async def get_procurement(
    procurement_id: ProcurementId,
    manager: ProcurementDataManager = Depends(get_data_manager),
) -> dict:
    return success(ProcurementOut.of(await manager.load_by_id(procurement_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_procurement(
    body: ProcurementDto,
    manager: ProcurementDataManager = Depends(get_data_manager),
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info(
        "procurement.create.start request_id=%s user_id=%s uin=%s fz_number=%s",
        body.request_id,
        principal.user_id,
        body.uin,
        body.fz_number,
    )
    saved = await manager.save(body.to_entity())
    log.info("procurement.create.done request_id=%s id=%s", body.request_id, saved.id)
    return success(ProcurementOut.of(saved), message="procurement created")


@router.put("/{procurement_id}")
async def replace_procurement(
    procurement_id: ProcurementId,
    body: ProcurementDto,
    manager: ProcurementDataManager = Depends(get_data_manager),
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info(
        "procurement.replace.start request_id=%s user_id=%s id=%s",
        body.request_id,
        principal.user_id,
        procurement_id,
    )
    saved = await manager.save(body.to_entity(procurement_id))
    return success(ProcurementOut.of(saved), message="procurement updated")


@router.delete("/{procurement_id}")
async def delete_procurement(
    procurement_id: ProcurementId,
    manager: ProcurementDataManager = Depends(get_data_manager),
    principal: Principal = Depends(get_principal),
) -> dict:
    log.info("procurement.delete.start user_id=%s id=%s", principal.user_id, procurement_id)
    await manager.delete_by_id(procurement_id)
    return success({"id": procurement_id}, message="procurement deleted")
