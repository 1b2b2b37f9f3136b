from __future__ import annotations

from enum import Enum

import bcrypt

from zhelper.auth.jwt import create_access_token
from zhelper.auth.models import ERole, SELF_SERVICE_ROLES
from zhelper.configs.settings import Settings
from zhelper.db.models import User
from zhelper.domain.entities.user import SignInRequest, SignUpRequest, TokenResponse, UserOut
from zhelper.errors import AuthError, ConflictError, ForbiddenError
from zhelper.repositories.user_repository import UserRepository
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


class CheckUserResult(str, Enum):
    CORRECT = "user is valid, access allowed"
    INCORRECT = "user is not valid (banned, disabled or deleted)"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def check_user(user: User | None) -> CheckUserResult:
    if user is None or not user.is_active or user.is_banned:
        return CheckUserResult.INCORRECT
    return CheckUserResult.CORRECT


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        roles=sorted(user.role_names),
        is_active=user.is_active,
        is_banned=user.is_banned,
    )


class UserService:
    def __init__(self, repo: UserRepository, settings: Settings):
        self._repo = repo
        self._settings = settings

    async def sign_up(self, req: SignUpRequest) -> UserOut:
        roles = set(req.roles or {ERole.ROLE_USER.value})
        privileged = roles - SELF_SERVICE_ROLES
        if privileged:
            log.info("user.sign_up privileged_roles username=%s roles=%s", req.username, sorted(privileged))
            raise ForbiddenError("roles cannot be self-assigned: " + ", ".join(sorted(privileged)))
        if await self._repo.username_or_email_taken(req.username, req.email):
            raise ConflictError("username or email already registered")

        user = await self._repo.insert(
            User(
                username=req.username,
                email=str(req.email),
                password_hash=hash_password(req.password),
                roles=",".join(sorted(roles)),
                is_active=True,
                is_banned=False,
            )
        )
        log.info("user.sign_up.done user_id=%s username=%s", user.id, user.username)
        return to_user_out(user)

    async def sign_in(self, req: SignInRequest) -> TokenResponse:
        user = await self._repo.get_by_username(req.username)
        if user is None or not verify_password(req.password, user.password_hash):
            log.info("user.sign_in bad_credentials username=%s", req.username)
            raise AuthError("bad credentials")
        if check_user(user) is CheckUserResult.INCORRECT:
            log.info("user.sign_in rejected user_id=%s", user.id)
            raise ForbiddenError(CheckUserResult.INCORRECT.value)

        roles = sorted(user.role_names)
        token = create_access_token(
            user_id=str(user.id),
            username=user.username,
            roles=roles,
            settings=self._settings,
        )
        log.info("user.sign_in.done user_id=%s roles=%s", user.id, ",".join(roles))
        return TokenResponse(
            access_token=token,
            expires_in=self._settings.access_token_expire_minutes * 60,
            roles=roles,
        )

    async def list_users(self, *, page: int, size: int) -> list[UserOut]:
        users = await self._repo.list(skip=page * size, limit=size)
        return [to_user_out(u) for u in users]
