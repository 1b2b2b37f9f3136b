"""
Declarative URL authorization.

The policy is an ordered table of `(pattern, requirement)` pairs. Patterns use
Ant-style wildcards: `*` matches within one path segment, `**` matches any
number of segments. Rules are ordered most-specific-first and the first rule
whose pattern (and method set, if any) matches decides the request.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from zhelper.auth.models import ERole, SecurityContext


class Decision(str, Enum):
    PERMIT = "permit"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


class RequirementKind(str, Enum):
    PERMIT_ALL = "permit_all"
    AUTHENTICATED = "authenticated"
    ANY_ROLE = "any_role"
    AUTHORITY = "authority"


@dataclass(frozen=True)
class Requirement:
    kind: RequirementKind
    roles: frozenset[str] = frozenset()

    def check(self, context: SecurityContext) -> Decision:
        if self.kind is RequirementKind.PERMIT_ALL:
            return Decision.PERMIT
        if not context.authenticated:
            return Decision.UNAUTHENTICATED
        if self.kind is RequirementKind.AUTHENTICATED:
            return Decision.PERMIT
        # ANY_ROLE and AUTHORITY both compare exact, case-sensitive role names
        if context.principal.has_any_role(self.roles):
            return Decision.PERMIT
        return Decision.FORBIDDEN


def permit_all() -> Requirement:
    return Requirement(RequirementKind.PERMIT_ALL)


def authenticated() -> Requirement:
    return Requirement(RequirementKind.AUTHENTICATED)


def has_any_role(*roles: str) -> Requirement:
    return Requirement(RequirementKind.ANY_ROLE, frozenset(str(r) for r in roles))


def has_authority(role: str) -> Requirement:
    return Requirement(RequirementKind.AUTHORITY, frozenset({str(role)}))


def normalize_path(path: str) -> str:
    if not path:
        return "/"
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"
    return path


def _compile(pattern: str) -> re.Pattern[str]:
    pattern = normalize_path(pattern)
    suffix = ""
    if pattern.endswith("/**"):
        pattern, suffix = pattern[:-3], r"(?:/.*)?"
    body = re.escape(pattern).replace(r"\*\*", ".*").replace(r"\*", "[^/]*")
    return re.compile(f"^{body}{suffix}$")


@dataclass(frozen=True)
class AccessRule:
    pattern: str
    requirement: Requirement
    methods: Optional[frozenset[str]] = None
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", _compile(self.pattern))
        if self.methods is not None:
            object.__setattr__(self, "methods", frozenset(m.upper() for m in self.methods))

    def matches(self, path: str, method: str) -> bool:
        if self.methods is not None and method.upper() not in self.methods:
            return False
        return self._regex.match(path) is not None

    def specificity(self) -> tuple[int, int, int]:
        literal = self.pattern.split("*", 1)[0]
        # method-restricted rules first, then longer literal prefix, then fewer wildcards
        return (0 if self.methods else 1, -len(literal), self.pattern.count("*"))


class AuthorizationPolicy:
    def __init__(self, rules: Iterable[AccessRule]):
        self._rules: tuple[AccessRule, ...] = tuple(sorted(rules, key=AccessRule.specificity))

    @property
    def rules(self) -> Sequence[AccessRule]:
        return self._rules

    def rule_for(self, path: str, method: str) -> Optional[AccessRule]:
        path = normalize_path(path)
        for rule in self._rules:
            if rule.matches(path, method):
                return rule
        return None

    def evaluate(self, path: str, method: str, context: SecurityContext) -> Decision:
        rule = self.rule_for(path, method)
        if rule is None:
            # no rule means no opinion; fail closed like the catch-all would
            return authenticated().check(context)
        return rule.requirement.check(context)


PUBLIC_PATHS = (
    "/",
    "/health",
    "/v1/auth/signin",
    "/v1/auth/signup",
    "/v1/auth/code/**",
)

MANAGEMENT_API = "/api/v1/management/**"
CHROME_API = "/api/v1/chrome/**"
TEST_CHROME_JWT_AUTH = "/v1/auth/test/**"


def default_rules() -> list[AccessRule]:
    admin_or_extension = has_any_role(ERole.ROLE_ADMIN.value, ERole.ROLE_CHROME_EXTENSION.value)
    rules = [AccessRule(p, permit_all()) for p in PUBLIC_PATHS]
    rules += [
        AccessRule("/**", permit_all(), methods=frozenset({"OPTIONS"})),
        AccessRule(MANAGEMENT_API, admin_or_extension),
        AccessRule(CHROME_API, admin_or_extension),
        AccessRule(TEST_CHROME_JWT_AUTH, has_authority(ERole.ROLE_CHROME_EXTENSION.value)),
        AccessRule("/**", authenticated()),
    ]
    return rules


def default_policy() -> AuthorizationPolicy:
    return AuthorizationPolicy(default_rules())
