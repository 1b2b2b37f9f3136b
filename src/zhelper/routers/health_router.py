from __future__ import annotations

from fastapi import APIRouter, Request

from zhelper.utils.response import success

router = APIRouter()

INDEX_PAGE_NAME = "/"


@router.get(INDEX_PAGE_NAME)
async def index(request: Request) -> dict:
    settings = request.app.state.settings
    return success({"service": settings.SERVICE_NAME, "environment": settings.ENVIRONMENT})


@router.get("/health")
async def health() -> dict:
    return success({"ok": True}, message="healthy")
