"""Role manager backed by the Auth0 Management API.

On construction the adapter connects to the tenant, loads every user and role
into two sealed name/id maps, and from then on answers queries by resolving
names locally and asking Auth0 for memberships page by page.

Lifecycle: UNINITIALIZED -> INITIALIZING -> LOADED, or FAILED. A failed
construction raises, so callers never hold a FAILED instance.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from functools import partial
from typing import Any, Protocol

from pydantic import ValidationError

from auth0_rbac.cache import NameIDMap
from auth0_rbac.client import ManagementClient
from auth0_rbac.config import ManagementConfig
from auth0_rbac.errors import (
    ConfigurationError,
    RoleManagerError,
    UnknownGroupError,
    UnknownPrincipalError,
)
from auth0_rbac.loader import BulkLoader, DirectorySource, LoadSummary
from auth0_rbac.pagination import collect
from auth0_rbac.rbac.base import ReadOnlyRoleManager

logger = logging.getLogger(__name__)


class AdapterState(StrEnum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    LOADED = "loaded"
    FAILED = "failed"


class ManagementSession(DirectorySource, Protocol):
    def connect(self) -> None: ...

    def close(self) -> None: ...


class Auth0RoleManager(ReadOnlyRoleManager):
    """Answers role-inheritance queries from Auth0 users and roles.

    Users are addressed by email and roles by name. Domain arguments are
    rejected on every method, and the role graph cannot be modified from here.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        tenant: str,
        *,
        client: ManagementSession | None = None,
        **options: Any,
    ) -> None:
        """Connect with client credentials and load the tenant's users and roles.

        ``options`` are further ``ManagementConfig`` fields such as
        ``page_size`` or ``max_pages``.
        """
        try:
            config = ManagementConfig(
                client_id=client_id,
                client_secret=client_secret,
                tenant=tenant,
                **options,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid Auth0 settings: {e}") from e
        self._setup(config, client)

    @classmethod
    def from_config(cls, config: ManagementConfig, *, client: ManagementSession | None = None) -> Auth0RoleManager:
        """Construct a loaded adapter from an already validated config."""
        manager = cls.__new__(cls)
        manager._setup(config, client)
        return manager

    def _setup(self, config: ManagementConfig, client: ManagementSession | None) -> None:
        self._state = AdapterState.UNINITIALIZED
        self._config = config
        self._owns_client = client is None
        self._client: ManagementSession = client if client is not None else ManagementClient(config)
        self._principals = NameIDMap("principal", config.duplicates)
        self._groups = NameIDMap("group", config.duplicates)
        self.summary: LoadSummary | None = None
        self._initialize()

    def _initialize(self) -> None:
        self._state = AdapterState.INITIALIZING
        try:
            self._client.connect()
            loader = BulkLoader(
                self._client,
                page_size=self._config.page_size,
                max_pages=self._config.max_pages,
            )
            self.summary = loader.load_all(self._principals, self._groups)
        except ConfigurationError:
            self._fail()
            raise
        except RoleManagerError as e:
            self._fail()
            raise ConfigurationError(f"Failed to load Auth0 users and roles: {e}") from e
        except Exception:
            self._fail()
            raise

        self._principals.seal()
        self._groups.seal()
        self._state = AdapterState.LOADED

    def _fail(self) -> None:
        self._state = AdapterState.FAILED
        logger.error("Auth0 role manager initialization failed for %s", self._config.domain)
        if self._owns_client:
            self._client.close()

    @property
    def state(self) -> AdapterState:
        return self._state

    @property
    def principals(self) -> NameIDMap:
        return self._principals

    @property
    def groups(self) -> NameIDMap:
        return self._groups

    def get_roles(self, name: str, *domain: str) -> list[str]:
        """Names of the Auth0 roles assigned to the user with email ``name``.

        Order follows Auth0's pages. Role names come from the membership
        response itself, so roles created after loading still show up.
        """
        self._reject_domain(domain)
        user_id = self._principals.get_id(name)
        if user_id is None:
            raise UnknownPrincipalError(name)

        fetch = partial(self._client.user_roles, user_id)
        groups = collect(fetch, self._config.page_size, max_pages=self._config.max_pages)
        return [g.name for g in groups]

    def get_users(self, name: str, *domain: str) -> list[str]:
        """Emails of the users holding the Auth0 role ``name``."""
        self._reject_domain(domain)
        role_id = self._groups.get_id(name)
        if role_id is None:
            raise UnknownGroupError(name)

        fetch = partial(self._client.role_users, role_id)
        users = collect(fetch, self._config.page_size, max_pages=self._config.max_pages)
        return [u.email for u in users]

    def has_link(self, name1: str, name2: str, *domain: str) -> bool:
        self._reject_domain(domain)
        return name2 in self.get_roles(name1)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Auth0RoleManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Auth0RoleManager(domain={self._config.domain!r}, state={self._state.value!r}, "
            f"principals={len(self._principals)}, groups={len(self._groups)})"
        )
