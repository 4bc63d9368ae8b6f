"""Bidirectional name <-> provider id map, filled once and then sealed."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import StrEnum

from auth0_rbac.errors import (
    CacheSealedError,
    DuplicateNameError,
    UnknownIDError,
    UnknownNameError,
)

logger = logging.getLogger(__name__)


class CacheState(StrEnum):
    LOADING = "loading"
    READY = "ready"


class DuplicatePolicy(StrEnum):
    """What ``record`` does when a name or id is already mapped to something else."""

    FIRST_WINS = "first_wins"
    LAST_WINS = "last_wins"
    REJECT = "reject"


class NameIDMap:
    """Name/ID mapping for one kind of object (principals or groups).

    Both directions are kept consistent: ``lookup_id(n) == i`` iff
    ``lookup_name(i) == n``. Writes are only accepted while LOADING;
    after ``seal()`` the map never changes, so reads need no locking.
    """

    def __init__(self, kind: str, duplicates: DuplicatePolicy = DuplicatePolicy.FIRST_WINS) -> None:
        self.kind = kind
        self.duplicates = duplicates
        self._state = CacheState.LOADING
        self._name_to_id: dict[str, str] = {}
        self._id_to_name: dict[str, str] = {}

    @property
    def state(self) -> CacheState:
        return self._state

    def seal(self) -> None:
        self._state = CacheState.READY

    def record(self, name: str, provider_id: str) -> bool:
        """Insert ``(name, provider_id)`` into both directions.

        Returns True if the pair is now mapped, False if it was dropped by
        the FIRST_WINS policy. Nothing is written unless both directions can be.
        """
        if self._state is CacheState.READY:
            raise CacheSealedError(f"{self.kind} map is sealed; cannot record {name!r}")

        old_id = self._name_to_id.get(name)
        old_name = self._id_to_name.get(provider_id)
        if old_id == provider_id:
            return True

        if old_id is not None or old_name is not None:
            existing = old_id if old_id is not None else old_name
            if self.duplicates is DuplicatePolicy.REJECT:
                raise DuplicateNameError(self.kind, name, provider_id, existing)
            if self.duplicates is DuplicatePolicy.FIRST_WINS:
                logger.warning(
                    "Ignoring duplicate %s mapping %s -> %s (kept %s)",
                    self.kind, name, provider_id, existing,
                )
                return False
            logger.warning(
                "Replacing %s mapping for %s -> %s (was %s)",
                self.kind, name, provider_id, existing,
            )
            if old_id is not None:
                del self._id_to_name[old_id]
            if old_name is not None:
                del self._name_to_id[old_name]

        self._name_to_id[name] = provider_id
        self._id_to_name[provider_id] = name
        return True

    def lookup_id(self, name: str) -> str:
        try:
            return self._name_to_id[name]
        except KeyError:
            raise UnknownNameError(self.kind, name) from None

    def lookup_name(self, provider_id: str) -> str:
        try:
            return self._id_to_name[provider_id]
        except KeyError:
            raise UnknownIDError(self.kind, provider_id) from None

    def get_id(self, name: str) -> str | None:
        return self._name_to_id.get(name)

    def get_name(self, provider_id: str) -> str | None:
        return self._id_to_name.get(provider_id)

    def items(self) -> Iterator[tuple[str, str]]:
        """(name, provider_id) pairs in insertion order."""
        return iter(list(self._name_to_id.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._name_to_id

    def __len__(self) -> int:
        return len(self._name_to_id)

    def __repr__(self) -> str:
        return f"NameIDMap(kind={self.kind!r}, entries={len(self)}, state={self._state.value!r})"
