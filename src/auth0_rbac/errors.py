"""Exception hierarchy for the Auth0 role manager.

Lookup misses, transport failures, and unsupported capabilities are separate
branches so callers can tell "principal not in the loaded snapshot" apart from
"Auth0 is unreachable".
"""

from __future__ import annotations


class RoleManagerError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(RoleManagerError):
    """The remote session could not be established or the adapter failed to load."""


class LookupMissError(RoleManagerError):
    """A name or provider identifier is absent from the loaded snapshot."""


class UnknownNameError(LookupMissError, KeyError):
    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"Unknown {kind} name: {name!r}")
        self.kind = kind
        self.name = name

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return self.args[0]


class UnknownPrincipalError(UnknownNameError):
    def __init__(self, name: str) -> None:
        super().__init__("principal", name)


class UnknownGroupError(UnknownNameError):
    def __init__(self, name: str) -> None:
        super().__init__("group", name)


class UnknownIDError(LookupMissError, KeyError):
    def __init__(self, kind: str, provider_id: str) -> None:
        super().__init__(f"Unknown {kind} id: {provider_id!r}")
        self.kind = kind
        self.provider_id = provider_id

    def __str__(self) -> str:
        return self.args[0]


class DuplicateNameError(RoleManagerError):
    """Raised under the REJECT duplicate policy when a name or id is recorded twice."""

    def __init__(self, kind: str, name: str, provider_id: str, existing: str) -> None:
        super().__init__(
            f"Conflicting {kind} mapping {name!r} -> {provider_id!r} (already mapped to {existing!r})"
        )
        self.kind = kind
        self.name = name
        self.provider_id = provider_id
        self.existing = existing


class CacheSealedError(RoleManagerError):
    """A write was attempted on a name/id map after loading finished."""


class ManagementAPIError(RoleManagerError):
    """The Auth0 Management API returned an error or could not be reached."""

    def __init__(self, message: str, *, path: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class PaginationError(RoleManagerError):
    """Enumeration was abandoned at ``page``; no further pages were fetched."""

    def __init__(self, message: str, *, page: int) -> None:
        super().__init__(message)
        self.page = page


class DomainNotSupportedError(RoleManagerError):
    def __init__(self, domain: tuple[str, ...]) -> None:
        super().__init__(f"Domain-scoped roles are not supported (got {list(domain)!r})")
        self.domain = domain


class UnsupportedOperationError(RoleManagerError):
    """The backend does not implement this part of the role-manager contract."""

    def __init__(self, operation: str, backend: str) -> None:
        super().__init__(f"{operation} is not supported by {backend}")
        self.operation = operation
        self.backend = backend
