# comments in English; reST docstrings strict
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PaginationIn:
    """
    Input pagination contract.

    :param page: 1-based page number.
    :type page: int
    :param limit: Page size (> 0).
    :type limit: int
    :param sort: Sort tokens like ``["-created_at"]``.
    :type sort: Iterable[str] | None
    """

    page: int = 1
    limit: int = 20
    sort: Iterable[str] | None = None


@dataclass(frozen=True, slots=True)
class PageOut(Generic[T]):
    """
    Output page of DTOs.

    :param items: DTOs on this page.
    :type items: list[T]
    :param total: Total rows available.
    :type total: int
    :param page: Current page (1-based).
    :type page: int
    :param limit: Page size.
    :type limit: int
    """

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total
