"""Read-only snapshots of Auth0 users and roles."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Principal(BaseModel):
    """An Auth0 user. ``email`` is the name the policy engine sees."""

    model_config = ConfigDict(frozen=True)

    provider_id: str  # Auth0 user_id, e.g. "auth0|64f1..."
    email: str


class Group(BaseModel):
    """An Auth0 role. Policy rules refer to it by ``name``."""

    model_config = ConfigDict(frozen=True)

    provider_id: str  # Auth0 role id, e.g. "rol_abc123"
    name: str
    description: str | None = None
