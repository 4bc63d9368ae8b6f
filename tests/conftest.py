"""Shared fixtures: an in-memory stand-in for the Auth0 Management API."""

from __future__ import annotations

import pytest

from auth0_rbac.config import ManagementConfig
from auth0_rbac.errors import ConfigurationError, ManagementAPIError
from auth0_rbac.models import Group, Page, Principal


class FakeDirectory:
    """Serves users, roles, and memberships in pages like the Management API.

    ``fail_on`` maps a method name to the page index that should fail.
    Every listing call is appended to ``calls`` as ``(method, page)``.
    """

    def __init__(
        self,
        users: list[Principal],
        roles: list[Group],
        memberships: dict[str, list[str]] | None = None,
    ) -> None:
        self.users = users
        self.roles = roles
        self.memberships = memberships or {}  # user_id -> [role_id]
        self.calls: list[tuple[str, int]] = []
        self.fail_on: dict[str, int] = {}
        self.connect_error: Exception | None = None
        self.connected = False
        self.closed = False

    def connect(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    def close(self) -> None:
        self.closed = True

    def list_users(self, page: int, per_page: int) -> Page[Principal]:
        return self._page("list_users", self.users, page, per_page)

    def list_roles(self, page: int, per_page: int) -> Page[Group]:
        return self._page("list_roles", self.roles, page, per_page)

    def user_roles(self, user_id: str, page: int, per_page: int) -> Page[Group]:
        by_id = {r.provider_id: r for r in self.roles}
        assigned = [by_id[rid] for rid in self.memberships.get(user_id, [])]
        return self._page("user_roles", assigned, page, per_page)

    def role_users(self, role_id: str, page: int, per_page: int) -> Page[Principal]:
        members = [u for u in self.users if role_id in self.memberships.get(u.provider_id, [])]
        return self._page("role_users", members, page, per_page)

    def remote_calls(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)

    def _page(self, method: str, records: list, page: int, per_page: int) -> Page:
        self.calls.append((method, page))
        if self.fail_on.get(method) == page:
            raise ManagementAPIError("Service Unavailable", path=method, status_code=503)
        start = page * per_page
        return Page(
            items=records[start : start + per_page],
            index=page,
            start=start,
            limit=per_page,
            total=len(records),
        )


@pytest.fixture
def config() -> ManagementConfig:
    return ManagementConfig(
        client_id="cid",
        client_secret="shh",
        tenant="acme",
        page_size=2,
    )


@pytest.fixture
def directory() -> FakeDirectory:
    users = [
        Principal(provider_id="u1", email="alice@example.com"),
        Principal(provider_id="u2", email="bob@example.com"),
        Principal(provider_id="u3", email="carol@example.com"),
    ]
    roles = [
        Group(provider_id="r1", name="admin"),
        Group(provider_id="r2", name="billing"),
        Group(provider_id="r3", name="support"),
    ]
    memberships = {
        "u1": ["r1"],
        "u2": ["r2", "r3"],
    }
    return FakeDirectory(users, roles, memberships)


@pytest.fixture
def unreachable() -> ConfigurationError:
    return ConfigurationError("Token request to acme.auth0.com failed (401): Unauthorized")
