from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PaginationParams:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def _positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def parse_pagination(page: str | None = None, page_size: str | None = None) -> PaginationParams:
    """Lenient parsing: junk or non-positive values fall back to the defaults."""
    size = min(_positive_int(page_size, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)
    return PaginationParams(page=_positive_int(page, DEFAULT_PAGE), page_size=size)


def pagination_params(
    page: Annotated[str | None, Query()] = None,
    page_size: Annotated[str | None, Query()] = None,
) -> PaginationParams:
    return parse_pagination(page, page_size)


Pagination = Annotated[PaginationParams, Depends(pagination_params)]
