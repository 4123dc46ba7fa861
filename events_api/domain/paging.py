from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SortOrder:
    prop: str
    descending: bool = False

    @property
    def direction(self) -> str:
        return "desc" if self.descending else "asc"

    def as_param(self) -> str:
        return f"{self.prop},{self.direction}"


@dataclass(frozen=True)
class PageRequest:
    number: int = 0
    size: int = 20
    sort: tuple[SortOrder, ...] = ()

    @property
    def offset(self) -> int:
        return self.number * self.size

    def with_number(self, number: int) -> PageRequest:
        return PageRequest(number=number, size=self.size, sort=self.sort)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    request: PageRequest
    total_elements: int

    @property
    def number(self) -> int:
        return self.request.number

    @property
    def size(self) -> int:
        return self.request.size

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 1
        return math.ceil(self.total_elements / self.size)

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages
