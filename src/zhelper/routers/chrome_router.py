from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from zhelper.auth.dependencies import get_principal
from zhelper.auth.models import Principal
from zhelper.domain.entities.procurement import MAX_FZ_NUMBER, ProcurementDto, ProcurementOut
from zhelper.errors import NotFoundError
from zhelper.routers.deps import get_data_manager
from zhelper.services.procurement_data_manager import ProcurementDataManager
from zhelper.utils.response import success
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)

URL = "/api/v1/chrome"

router = APIRouter(prefix=URL, tags=["chrome-extension"])


@router.post("/procurements")
async def push_procurement(
    body: ProcurementDto,
    manager: ProcurementDataManager = Depends(get_data_manager),
    principal: Principal = Depends(get_principal),
) -> dict:
    """Upsert a procurement scraped by the extension, keyed by (uin, fz_number)."""
    try:
        existing = await manager.load_by_uin(body.uin, body.fz_number)
        entity_id = existing.id
    except NotFoundError:
        entity_id = None

    log.info(
        "chrome.push.start request_id=%s user_id=%s uin=%s fz_number=%s existing_id=%s",
        body.request_id,
        principal.user_id,
        body.uin,
        body.fz_number,
        entity_id,
    )
    saved = await manager.save(body.to_entity(entity_id))
    message = "procurement updated" if entity_id else "procurement created"
    return success(ProcurementOut.of(saved), message=message)


@router.get("/procurements/{uin}")
async def find_procurement(
    uin: str,
    fz_number: Optional[int] = Query(None, ge=1, le=MAX_FZ_NUMBER),
    manager: ProcurementDataManager = Depends(get_data_manager),
) -> dict:
    return success(ProcurementOut.of(await manager.load_by_uin(uin, fz_number)))
