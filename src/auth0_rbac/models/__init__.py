"""Data models for principals, groups, and listing pages."""

from auth0_rbac.models.identity import Group, Principal
from auth0_rbac.models.page import Page

__all__ = [
    "Group",
    "Page",
    "Principal",
]
