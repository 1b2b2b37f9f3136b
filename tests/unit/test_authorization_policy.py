from __future__ import annotations

import pytest

from zhelper.auth.models import ERole, Principal, SecurityContext
from zhelper.auth.policy import (
    AccessRule,
    AuthorizationPolicy,
    Decision,
    authenticated,
    default_policy,
    has_any_role,
    permit_all,
)

ANONYMOUS = SecurityContext.anonymous()


def ctx(*roles: str) -> SecurityContext:
    return SecurityContext(Principal(user_id="1", username="u", roles=frozenset(roles)))


@pytest.fixture(scope="module")
def policy() -> AuthorizationPolicy:
    return default_policy()


@pytest.mark.parametrize("path", ["/", "/health", "/v1/auth/signin", "/v1/auth/signup", "/v1/auth/code/abc"])
def test_public_paths_need_no_credential(policy, path) -> None:
    assert policy.evaluate(path, "GET", ANONYMOUS) is Decision.PERMIT


def test_management_requires_admin_or_extension(policy) -> None:
    path = "/api/v1/management/users"
    assert policy.evaluate(path, "GET", ANONYMOUS) is Decision.UNAUTHENTICATED
    assert policy.evaluate(path, "GET", ctx(ERole.ROLE_USER.value)) is Decision.FORBIDDEN
    assert policy.evaluate(path, "GET", ctx(ERole.ROLE_ADMIN.value)) is Decision.PERMIT
    assert policy.evaluate(path, "GET", ctx(ERole.ROLE_CHROME_EXTENSION.value)) is Decision.PERMIT


def test_chrome_api_requires_admin_or_extension(policy) -> None:
    path = "/api/v1/chrome/procurements"
    assert policy.evaluate(path, "POST", ctx(ERole.ROLE_TELEGRAM.value)) is Decision.FORBIDDEN
    assert policy.evaluate(path, "POST", ctx(ERole.ROLE_CHROME_EXTENSION.value)) is Decision.PERMIT


def test_test_jwt_path_requires_exactly_the_service_role(policy) -> None:
    path = "/v1/auth/test/"
    assert policy.evaluate(path, "GET", ctx(ERole.ROLE_ADMIN.value)) is Decision.FORBIDDEN
    assert policy.evaluate(path, "GET", ctx(ERole.ROLE_CHROME_EXTENSION.value)) is Decision.PERMIT


def test_other_paths_only_need_authentication(policy) -> None:
    path = "/api/v1/procurements/7"
    assert policy.evaluate(path, "DELETE", ANONYMOUS) is Decision.UNAUTHENTICATED
    assert policy.evaluate(path, "DELETE", ctx()) is Decision.PERMIT


def test_role_names_are_case_sensitive(policy) -> None:
    path = "/api/v1/management/users"
    assert policy.evaluate(path, "GET", ctx("role_admin")) is Decision.FORBIDDEN
    # legacy spellings of the extension role are not canonical
    assert policy.evaluate(path, "GET", ctx("CHROME_EXTENSION")) is Decision.FORBIDDEN


def test_preflight_is_always_permitted(policy) -> None:
    assert policy.evaluate("/api/v1/management/users", "OPTIONS", ANONYMOUS) is Decision.PERMIT


def test_most_specific_rule_wins_regardless_of_declaration_order() -> None:
    policy = AuthorizationPolicy(
        [
            AccessRule("/**", authenticated()),
            AccessRule("/api/**", has_any_role("A")),
            AccessRule("/api/public/**", permit_all()),
        ]
    )
    assert [r.pattern for r in policy.rules] == ["/api/public/**", "/api/**", "/**"]
    assert policy.evaluate("/api/public/x", "GET", ANONYMOUS) is Decision.PERMIT
    assert policy.evaluate("/api/x", "GET", ctx("B")) is Decision.FORBIDDEN
    assert policy.evaluate("/other", "GET", ctx("B")) is Decision.PERMIT


def test_single_star_stays_within_one_segment() -> None:
    policy = AuthorizationPolicy([AccessRule("/files/*", permit_all()), AccessRule("/**", authenticated())])
    assert policy.evaluate("/files/a.txt", "GET", ANONYMOUS) is Decision.PERMIT
    assert policy.evaluate("/files/a/b.txt", "GET", ANONYMOUS) is Decision.UNAUTHENTICATED


def test_policy_without_matching_rule_fails_closed() -> None:
    policy = AuthorizationPolicy([AccessRule("/open", permit_all())])
    assert policy.evaluate("/closed", "GET", ANONYMOUS) is Decision.UNAUTHENTICATED
