from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class ERole(str, Enum):
    ROLE_USER = "ROLE_USER"
    ROLE_ADMIN = "ROLE_ADMIN"
    ROLE_TELEGRAM = "ROLE_TELEGRAM"
    ROLE_CHROME_EXTENSION = "ROLE_CHROME_EXTENSION"
    ROLE_EMAIL = "ROLE_EMAIL"

    @classmethod
    def names(cls) -> frozenset[str]:
        return frozenset(r.value for r in cls)


# roles a user may grant themselves through public sign-up
SELF_SERVICE_ROLES = frozenset({ERole.ROLE_USER.value, ERole.ROLE_TELEGRAM.value, ERole.ROLE_EMAIL.value})


@dataclass(frozen=True)
class Principal:
    user_id: str
    username: str
    roles: frozenset[str]

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(roles)


@dataclass(frozen=True)
class SecurityContext:
    """Identity bound to a single request; anonymous when `principal` is None."""

    principal: Optional[Principal] = None

    @property
    def authenticated(self) -> bool:
        return self.principal is not None

    @property
    def roles(self) -> frozenset[str]:
        return self.principal.roles if self.principal else frozenset()

    @classmethod
    def anonymous(cls) -> "SecurityContext":
        return cls()
