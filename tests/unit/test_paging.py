from __future__ import annotations

import pytest
from pydantic import ValidationError

from zhelper.domain.entities.page import Page, PageRequest


def test_page_request_offset() -> None:
    assert PageRequest.of(0, 5).offset == 0
    assert PageRequest.of(3, 20).offset == 60


@pytest.mark.parametrize("page,size", [(-1, 5), (0, 0)])
def test_page_request_rejects_out_of_range(page, size) -> None:
    with pytest.raises(ValidationError):
        PageRequest.of(page, size)


def test_total_pages_rounds_up() -> None:
    assert Page(items=[1, 2], total=11, page=0, size=5).total_pages == 3
    assert Page.empty(PageRequest.of(0, 5)).total_pages == 0


def test_map_keeps_paging_metadata() -> None:
    page = Page(items=[1, 2], total=12, page=2, size=2).map(str)
    assert page.items == ["1", "2"]
    assert (page.total, page.page, page.size) == (12, 2, 2)


def test_page_request_rejects_offset_beyond_bigint() -> None:
    with pytest.raises(ValidationError):
        PageRequest.of(10**18, 20)
    assert PageRequest.of(10**17, 20).offset == 2 * 10**18
