"""Pagination container returned by listing use cases."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """A slice of results plus the metadata needed to navigate between slices."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 10

    @property
    def last_page(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0

    @property
    def prev(self) -> int | None:
        return self.page - 1 if self.page > 1 else None

    @property
    def next(self) -> int | None:
        return self.page + 1 if self.page < self.last_page else None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page
