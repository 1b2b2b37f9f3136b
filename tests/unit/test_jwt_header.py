from __future__ import annotations

import pytest

from zhelper.auth.filter import bearer_token
from zhelper.errors import AuthError


def test_bearer_token_ok() -> None:
    assert bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"


def test_bearer_scheme_is_case_insensitive() -> None:
    assert bearer_token("bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.parametrize("value", [None, "", "Basic xxx", "Bearer", "Bearer "])
def test_bearer_token_invalid(value) -> None:
    with pytest.raises(AuthError):
        bearer_token(value)
