"""Offset pagination helpers shared by repositories."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from sqlalchemy.orm import Query

from userhub.constants import Pagination

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of query results plus the metadata needed to render it."""

    items: list[T]
    page: int
    per_page: int
    count: int
    max_page: int = field(init=False)

    def __post_init__(self) -> None:
        self.max_page = total_page(self.count, self.per_page)


def normalize(page: int | None, per_page: int | None) -> tuple[int, int]:
    """Apply defaults for unspecified (None or zero) page values."""
    return page or Pagination.DEFAULT_PAGE, per_page or Pagination.DEFAULT_PER_PAGE


def total_page(count: int, per_page: int) -> int:
    """Number of pages needed for ``count`` items.

    ``per_page == 0`` yields 0 rather than dividing by zero.
    """
    if per_page <= 0:
        return 0
    return math.ceil(count / per_page)


def paginate(query: Query, page: int, per_page: int) -> Query:
    """Apply offset/limit for a 1-based page number."""
    return query.offset((page - 1) * per_page).limit(per_page)
