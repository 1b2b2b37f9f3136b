from __future__ import annotations

from dataclasses import dataclass, field
from math import ceil
from typing import Callable, Generic, List, TypeVar

from pydantic import BaseModel, Field, model_validator

# largest value a BIGINT column or an SQL OFFSET accepts
MAX_DB_INT = 2**63 - 1

T = TypeVar("T")
R = TypeVar("R")


class PageRequest(BaseModel):
    """Zero-based page number and page size."""

    page: int = Field(default=0, ge=0)
    size: int = Field(default=20, ge=1, le=MAX_DB_INT)

    @model_validator(mode="after")
    def offset_fits_database(self) -> "PageRequest":
        if self.page * self.size > MAX_DB_INT:
            raise ValueError("page offset out of range")
        return self

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def of(cls, page: int, size: int) -> "PageRequest":
        return cls(page=page, size=size)


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 0
    size: int = 20

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.size) if self.size else 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def map(self, fn: Callable[[T], R]) -> "Page[R]":
        return Page(items=[fn(i) for i in self.items], total=self.total, page=self.page, size=self.size)

    def to_dict(self) -> dict:
        return {
            "items": self.items,
            "total": self.total,
            "page": self.page,
            "size": self.size,
            "total_pages": self.total_pages,
        }

    @classmethod
    def empty(cls, pageable: PageRequest) -> "Page[T]":
        return cls(items=[], total=0, page=pageable.page, size=pageable.size)
