"""Connection settings for the Auth0 Management API."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, SecretStr

from auth0_rbac.cache import DuplicatePolicy
from auth0_rbac.errors import ConfigurationError

# Auth0 caps per_page at 100 on every listing endpoint
MAX_PAGE_SIZE = 100


class ManagementConfig(BaseModel):
    """Credentials and paging settings.

    ``tenant`` is the tenant name ("abc" for abc.auth0.com) or a full domain
    for regional and custom domains ("abc.eu.auth0.com").
    """

    client_id: str
    client_secret: SecretStr
    tenant: str
    audience: str | None = None
    page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    max_pages: int | None = Field(default=None, ge=1)
    timeout: float = 30.0
    duplicates: DuplicatePolicy = DuplicatePolicy.FIRST_WINS

    @property
    def domain(self) -> str:
        tenant = self.tenant.strip().removeprefix("https://").rstrip("/")
        if "." in tenant:
            return tenant
        return f"{tenant}.auth0.com"

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}"

    @property
    def api_audience(self) -> str:
        return self.audience or f"{self.base_url}/api/v2/"

    @staticmethod
    def section(data: object) -> dict:
        """Accept either a bare mapping or one nested under ``auth0:``."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Auth0 settings must be a mapping, got {type(data).__name__}")
        section = data.get("auth0", data)
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"Auth0 settings under 'auth0' must be a mapping, got {type(section).__name__}"
            )
        return dict(section)

    @staticmethod
    def read_yaml(path: Path) -> dict:
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e
        return ManagementConfig.section({} if data is None else data)

    @classmethod
    def from_dict(cls, data: dict) -> ManagementConfig:
        return cls.model_validate(cls.section(data))

    @classmethod
    def from_yaml(cls, path: Path) -> ManagementConfig:
        return cls.model_validate(cls.read_yaml(path))
