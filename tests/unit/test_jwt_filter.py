from __future__ import annotations

from datetime import timedelta

from jose import jwt

from zhelper.auth.filter import JwtAuthenticationFilter
from zhelper.auth.jwt import create_access_token
from zhelper.auth.models import ERole


def test_valid_token_binds_principal(settings) -> None:
    token = create_access_token(
        user_id="7", username="ext", roles=[ERole.ROLE_CHROME_EXTENSION.value], settings=settings
    )
    context = JwtAuthenticationFilter(settings).authenticate(f"Bearer {token}")
    assert context.authenticated
    assert context.principal.user_id == "7"
    assert context.principal.username == "ext"
    assert context.roles == frozenset({"ROLE_CHROME_EXTENSION"})


def test_missing_header_is_anonymous(settings) -> None:
    assert not JwtAuthenticationFilter(settings).authenticate(None).authenticated


def test_malformed_token_is_anonymous(settings) -> None:
    assert not JwtAuthenticationFilter(settings).authenticate("Bearer not-a-jwt").authenticated
    assert not JwtAuthenticationFilter(settings).authenticate("Token abc").authenticated


def test_expired_token_is_anonymous(settings) -> None:
    token = create_access_token(
        user_id="7", username="ext", roles=[], settings=settings, expires_delta=timedelta(seconds=-5)
    )
    assert not JwtAuthenticationFilter(settings).authenticate(f"Bearer {token}").authenticated


def test_token_signed_with_other_secret_is_anonymous(settings) -> None:
    forged = settings.model_copy(update={"jwt_secret": "someone-else"})
    token = create_access_token(user_id="7", username="x", roles=[ERole.ROLE_ADMIN.value], settings=forged)
    assert not JwtAuthenticationFilter(settings).authenticate(f"Bearer {token}").authenticated


def test_non_access_token_is_anonymous(settings) -> None:
    token = jwt.encode({"sub": "7", "roles": [], "type": "refresh"}, settings.jwt_secret, algorithm=settings.jwt_alg)
    assert not JwtAuthenticationFilter(settings).authenticate(f"Bearer {token}").authenticated
