"""
Router dependencies: one session, repository and service per request.
"""
from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Path, Query, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from zhelper.configs.settings import Settings
from zhelper.db.database import get_session
from zhelper.domain.entities.page import MAX_DB_INT, PageRequest
from zhelper.domain.entities.procurement import MAX_FZ_NUMBER
from zhelper.errors import ValidationFailure
from zhelper.repositories.procurement_repository import ProcurementRepository
from zhelper.repositories.user_repository import UserRepository
from zhelper.services.procurement_data_manager import ProcurementDataManager
from zhelper.services.user_service import UserService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_data_manager(session: AsyncSession = Depends(get_session)) -> ProcurementDataManager:
    return ProcurementDataManager(ProcurementRepository(session))


def get_user_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> UserService:
    return UserService(UserRepository(session), settings)


def get_page_request(
    page: int = Query(0, ge=0, le=MAX_DB_INT),
    size: Optional[int] = Query(None, ge=1, le=MAX_DB_INT),
    settings: Settings = Depends(get_app_settings),
) -> PageRequest:
    size = size or settings.default_page_size
    try:
        return PageRequest.of(page, min(size, settings.max_page_size))
    except ValidationError as e:
        raise ValidationFailure("page out of range") from e


ProcurementId = Annotated[int, Path(ge=1, le=MAX_DB_INT)]
FzNumber = Annotated[int, Path(ge=1, le=MAX_FZ_NUMBER)]
