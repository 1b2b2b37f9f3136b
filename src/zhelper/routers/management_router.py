from __future__ import annotations

from fastapi import APIRouter, Depends

from zhelper.auth.dependencies import require_any_role
from zhelper.auth.models import ERole, Principal
from zhelper.domain.entities.page import PageRequest
from zhelper.routers.deps import ProcurementId, get_data_manager, get_page_request, get_user_service
from zhelper.services.procurement_data_manager import ProcurementDataManager
from zhelper.services.user_service import UserService
from zhelper.utils.response import success
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/api/v1/management", tags=["management"])

admin_or_extension = require_any_role(ERole.ROLE_ADMIN.value, ERole.ROLE_CHROME_EXTENSION.value)


@router.get("/users")
async def list_users(
    pageable: PageRequest = Depends(get_page_request),
    svc: UserService = Depends(get_user_service),
    _: Principal = Depends(admin_or_extension),
) -> dict:
    users = await svc.list_users(page=pageable.page, size=pageable.size)
    return success([u.model_dump() for u in users])


@router.delete("/procurements/{procurement_id}")
async def delete_procurement(
    procurement_id: ProcurementId,
    manager: ProcurementDataManager = Depends(get_data_manager),
    principal: Principal = Depends(admin_or_extension),
) -> dict:
    log.info("management.procurement.delete user_id=%s id=%s", principal.user_id, procurement_id)
    await manager.delete_by_id(procurement_id)
    return success({"id": procurement_id}, message="procurement deleted")
