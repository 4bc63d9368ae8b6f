"""Synchronous client for the parts of the Auth0 Management API the adapter reads.

Only listing endpoints are used. Every call returns one ``Page``; walking the
pages is left to ``auth0_rbac.pagination``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from auth0_rbac.config import ManagementConfig
from auth0_rbac.errors import ConfigurationError, ManagementAPIError
from auth0_rbac.models.identity import Group, Principal
from auth0_rbac.models.page import Page

logger = logging.getLogger(__name__)

_USER_AGENT = "auth0-rbac/0.1"


class ManagementClient:
    """Credentialed access to ``https://{domain}/api/v2``.

    ``connect()`` must succeed before any listing call. ``transport`` is passed
    straight to ``httpx.Client`` so tests can substitute ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ManagementConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._http = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
            headers={"User-Agent": _USER_AGENT},
        )
        self._connected = False

    @property
    def config(self) -> ManagementConfig:
        return self._config

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """Obtain a Management API token with the client-credentials grant."""
        payload = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret.get_secret_value(),
            "audience": self._config.api_audience,
        }
        try:
            resp = self._http.post("/oauth/token", json=payload)
        except httpx.HTTPError as e:
            raise ConfigurationError(f"Cannot reach {self._config.domain}: {e}") from e

        if resp.status_code != 200:
            raise ConfigurationError(
                f"Token request to {self._config.domain} failed "
                f"({resp.status_code}): {_error_message(resp)}"
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise ConfigurationError(f"Token response from {self._config.domain} was not JSON") from e

        token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise ConfigurationError(f"Token response from {self._config.domain} had no access_token")

        self._http.headers["Authorization"] = f"Bearer {token}"
        self._connected = True
        logger.info("Connected to Auth0 tenant %s", self._config.domain)

    def list_users(self, page: int, per_page: int) -> Page[Principal]:
        return self._fetch("/api/v2/users", page, per_page, _principal_page, "users")

    def list_roles(self, page: int, per_page: int) -> Page[Group]:
        return self._fetch("/api/v2/roles", page, per_page, _group_page, "roles")

    def user_roles(self, user_id: str, page: int, per_page: int) -> Page[Group]:
        path = f"/api/v2/users/{quote(user_id, safe='')}/roles"
        return self._fetch(path, page, per_page, _group_page, "roles")

    def role_users(self, role_id: str, page: int, per_page: int) -> Page[Principal]:
        path = f"/api/v2/roles/{quote(role_id, safe='')}/users"
        return self._fetch(path, page, per_page, _principal_page, "users")

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ManagementClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get_page(self, path: str, page: int, per_page: int) -> dict[str, Any]:
        if not self._connected:
            raise ConfigurationError("ManagementClient not connected; call connect() first")

        params = {"page": page, "per_page": per_page, "include_totals": "true"}
        try:
            resp = self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise ManagementAPIError(f"GET {path} failed: {e}", path=path) from e

        if resp.status_code != 200:
            raise ManagementAPIError(
                f"GET {path} returned {resp.status_code}: {_error_message(resp)}",
                path=path,
                status_code=resp.status_code,
            )
        try:
            body = resp.json()
        except ValueError as e:
            raise ManagementAPIError(f"GET {path} returned a non-JSON body", path=path, status_code=200) from e
        if not isinstance(body, dict):
            raise ManagementAPIError(
                f"GET {path} returned {type(body).__name__}, expected an object",
                path=path,
                status_code=200,
            )
        return body

    def _fetch(
        self,
        path: str,
        page: int,
        per_page: int,
        build: Callable[[dict[str, Any], str, int], Page],
        key: str,
    ) -> Page:
        data = self._get_page(path, page, per_page)
        try:
            return build(data, key, page)
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise ManagementAPIError(f"GET {path} returned a malformed {key} page: {e!r}", path=path) from e


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        return body.get("message") or body.get("error_description") or body.get("error") or str(body)
    return str(body)


def _page_meta(data: dict[str, Any], key: str, index: int) -> dict[str, Any]:
    records = data.get(key, [])
    return {
        "index": index,
        "start": data.get("start", 0),
        "limit": data.get("limit", len(records)),
        "total": data.get("total", len(records)),
        "length": data.get("length", len(records)),
    }


def _principal_page(data: dict[str, Any], key: str, index: int) -> Page[Principal]:
    items: list[Principal] = []
    for record in data.get(key, []):
        email = record.get("email")
        if not email:
            logger.debug("Skipping user %s without an email", record.get("user_id"))
            continue
        items.append(Principal(provider_id=record["user_id"], email=email))
    return Page[Principal](items=items, **_page_meta(data, key, index))


def _group_page(data: dict[str, Any], key: str, index: int) -> Page[Group]:
    items = [
        Group(
            provider_id=record["id"],
            name=record["name"],
            description=record.get("description"),
        )
        for record in data.get(key, [])
    ]
    return Page[Group](items=items, **_page_meta(data, key, index))
