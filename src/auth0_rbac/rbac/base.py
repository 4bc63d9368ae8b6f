"""Pluggable role-manager interface.

Mirrors the method names of pycasbin's ``RoleManager`` so a backend can be
handed to an enforcer directly. Backends advertise what they implement through
``capabilities``; read-only backends derive from ``ReadOnlyRoleManager``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import ClassVar

from auth0_rbac.errors import DomainNotSupportedError, UnsupportedOperationError


class Capability(StrEnum):
    """Optional operation groups. ``clear`` is available on every backend."""

    QUERY = "query"  # get_roles, get_users, has_link
    MUTATE = "mutate"  # add_link, delete_link
    PRINT = "print"  # print_roles


class RoleManager(ABC):
    """Abstract interface for role-inheritance backends."""

    capabilities: ClassVar[frozenset[Capability]] = frozenset(Capability)

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @abstractmethod
    def clear(self) -> None:
        """Reset the backend's local state."""

    @abstractmethod
    def add_link(self, name1: str, name2: str, *domain: str) -> None:
        """Make ``name1`` inherit ``name2``."""

    @abstractmethod
    def delete_link(self, name1: str, name2: str, *domain: str) -> None:
        """Remove the inheritance link between ``name1`` and ``name2``."""

    @abstractmethod
    def has_link(self, name1: str, name2: str, *domain: str) -> bool:
        """Whether ``name1`` inherits ``name2``."""

    @abstractmethod
    def get_roles(self, name: str, *domain: str) -> list[str]:
        """Roles that ``name`` inherits."""

    @abstractmethod
    def get_users(self, name: str, *domain: str) -> list[str]:
        """Subjects that inherit ``name``."""

    @abstractmethod
    def print_roles(self) -> None:
        """Log the full role graph."""


class ReadOnlyRoleManager(RoleManager):
    """Base for backends whose role graph is owned elsewhere.

    Structural changes and dumping the graph raise ``UnsupportedOperationError``.
    ``clear()`` is accepted and does nothing, since local state is only a snapshot.
    """

    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.QUERY})

    def clear(self) -> None:
        return None

    def add_link(self, name1: str, name2: str, *domain: str) -> None:
        raise UnsupportedOperationError("add_link", type(self).__name__)

    def delete_link(self, name1: str, name2: str, *domain: str) -> None:
        raise UnsupportedOperationError("delete_link", type(self).__name__)

    def print_roles(self) -> None:
        raise UnsupportedOperationError("print_roles", type(self).__name__)

    @staticmethod
    def _reject_domain(domain: tuple[str, ...]) -> None:
        if domain:
            raise DomainNotSupportedError(domain)
