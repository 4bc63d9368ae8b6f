"""Role-manager backends."""

from auth0_rbac.rbac.auth0 import AdapterState, Auth0RoleManager
from auth0_rbac.rbac.base import Capability, ReadOnlyRoleManager, RoleManager

__all__ = [
    "AdapterState",
    "Auth0RoleManager",
    "Capability",
    "ReadOnlyRoleManager",
    "RoleManager",
]
