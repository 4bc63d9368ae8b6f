"""One page of a paginated Management API listing."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """A page as returned with ``include_totals=true``.

    ``start`` is the offset of the first record and ``total`` the size of the
    whole listing. ``length`` is the number of records the server sent, which
    can exceed ``len(items)`` when the client drops records it cannot map
    (users without an email). A page has a successor when the listing extends
    past it.
    """

    items: list[T]
    index: int
    start: int = 0
    limit: int = 0
    total: int = 0
    length: int | None = None

    @property
    def has_next(self) -> bool:
        count = len(self.items) if self.length is None else self.length
        if count == 0:
            return False
        return self.start + count < self.total
