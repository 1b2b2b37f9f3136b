from __future__ import annotations

from fastapi import APIRouter, Depends, status

from zhelper.auth.dependencies import get_principal
from zhelper.auth.models import Principal
from zhelper.domain.entities.user import SignInRequest, SignUpRequest
from zhelper.routers.deps import get_user_service
from zhelper.services.user_service import UserService
from zhelper.utils.response import success
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)

URL = "/v1/auth"
TEST_JWT = "/test"

router = APIRouter(prefix=URL, tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(body: SignUpRequest, svc: UserService = Depends(get_user_service)) -> dict:
    log.info("auth.sign_up.start username=%s", body.username)
    user = await svc.sign_up(body)
    return success(user.model_dump(), message="user registered")


@router.post("/signin")
async def sign_in(body: SignInRequest, svc: UserService = Depends(get_user_service)) -> dict:
    log.info("auth.sign_in.start username=%s", body.username)
    token = await svc.sign_in(body)
    return success(token.model_dump())


@router.get(TEST_JWT + "/")
async def test_jwt(principal: Principal = Depends(get_principal)) -> dict:
    """Lets the browser extension check that its token is accepted."""
    return success(
        {
            "user_id": principal.user_id,
            "username": principal.username,
            "roles": sorted(principal.roles),
        },
        message="token accepted",
    )
