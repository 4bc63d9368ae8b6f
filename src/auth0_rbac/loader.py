"""Bulk loader: fills the principal and group maps from a full Auth0 enumeration.

Users are loaded first, then roles. Each enumeration is independent: if roles
fail, the users already recorded stay in their map and the error propagates.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel

from auth0_rbac.cache import NameIDMap
from auth0_rbac.config import MAX_PAGE_SIZE
from auth0_rbac.models.identity import Group, Principal
from auth0_rbac.models.page import Page
from auth0_rbac.pagination import iter_pages

logger = logging.getLogger(__name__)


class DirectorySource(Protocol):
    """The listing calls the loader and the role manager need from a client."""

    def list_users(self, page: int, per_page: int) -> Page[Principal]: ...

    def list_roles(self, page: int, per_page: int) -> Page[Group]: ...

    def user_roles(self, user_id: str, page: int, per_page: int) -> Page[Group]: ...

    def role_users(self, role_id: str, page: int, per_page: int) -> Page[Principal]: ...


class LoadSummary(BaseModel):
    principals: int
    groups: int
    pages: int


class BulkLoader:
    def __init__(
        self,
        source: DirectorySource,
        page_size: int = MAX_PAGE_SIZE,
        max_pages: int | None = None,
    ) -> None:
        self._source = source
        self._page_size = page_size
        self._max_pages = max_pages

    def load_all(self, principals: NameIDMap, groups: NameIDMap) -> LoadSummary:
        """Record every (email, user_id) and every (role name, role id)."""
        pages = 0

        logger.info("Loading (ID, name) mapping for users")
        for page in iter_pages(self._source.list_users, self._page_size, max_pages=self._max_pages):
            pages += 1
            for user in page.items:
                if principals.record(user.email, user.provider_id):
                    logger.debug("%s -> %s", user.provider_id, user.email)

        logger.info("Loading (ID, name) mapping for roles")
        for page in iter_pages(self._source.list_roles, self._page_size, max_pages=self._max_pages):
            pages += 1
            for group in page.items:
                if groups.record(group.name, group.provider_id):
                    logger.debug("%s -> %s", group.provider_id, group.name)

        summary = LoadSummary(principals=len(principals), groups=len(groups), pages=pages)
        logger.info(
            "Loaded %d principals and %d groups in %d pages",
            summary.principals, summary.groups, summary.pages,
        )
        return summary
