"""Template keys: normalisation, collision handling and the key <-> id map."""

from __future__ import annotations

import re
from typing import Iterator, Optional

from ..exceptions import DuplicateEntityError, UnknownKeyError
from ..logging_config import get_logger

logger = get_logger(__name__)

_DISALLOWED = re.compile(r"[^A-Za-z0-9_]+")
_UNDERSCORES = re.compile(r"_+")

FALLBACK_KEY = "entity"


def normalize_key(name: str) -> str:
    """Turn a display name into a template key.

    Whitespace and any character outside [A-Za-z0-9_] become underscores,
    runs of underscores collapse to one, leading/trailing underscores are
    stripped and the result is lowercased.

    >>> normalize_key("  Order Service #2 ")
    'order_service_2'
    """
    key = _DISALLOWED.sub("_", name.strip())
    key = _UNDERSCORES.sub("_", key).strip("_").lower()
    return key or FALLBACK_KEY


class UniqueKeyManager:
    """Hands out keys, appending _1, _2, ... to keys already handed out.

    Suffixes are tried in order, so the same sequence of requests always
    yields the same keys.
    """

    def __init__(self) -> None:
        self._used: set[str] = set()

    def ensure_uniqueness(self, key: str) -> str:
        candidate = key
        counter = 0
        while candidate in self._used:
            counter += 1
            candidate = f"{key}_{counter}"
        if candidate != key:
            logger.debug(f"Key {key!r} already used, using {candidate!r}")
        self._used.add(candidate)
        return candidate

    def __contains__(self, key: str) -> bool:
        return key in self._used


class TwoWayKeyIdMap:
    """Bijection between template keys and entity ids."""

    def __init__(self) -> None:
        self._id_by_key: dict[str, str] = {}
        self._key_by_id: dict[str, str] = {}

    def add(self, key: str, entity_id: str) -> None:
        if self._id_by_key.get(key, entity_id) != entity_id:
            raise DuplicateEntityError("template key", key)
        if self._key_by_id.get(entity_id, key) != key:
            raise DuplicateEntityError("entity id", entity_id)
        self._id_by_key[key] = entity_id
        self._key_by_id[entity_id] = key

    def get_key(self, entity_id: str) -> str:
        try:
            return self._key_by_id[entity_id]
        except KeyError:
            raise UnknownKeyError("key", entity_id) from None

    def get_id(self, key: str) -> str:
        try:
            return self._id_by_key[key]
        except KeyError:
            raise UnknownKeyError("id", key) from None

    def find_id(self, key: str) -> Optional[str]:
        return self._id_by_key.get(key)

    def has_id(self, entity_id: str) -> bool:
        return entity_id in self._key_by_id

    def has_key(self, key: str) -> bool:
        return key in self._id_by_key

    def items(self) -> Iterator[tuple[str, str]]:
        """(key, id) pairs in insertion order."""
        return iter(self._id_by_key.items())

    def to_dict(self) -> dict[str, str]:
        return dict(self._id_by_key)

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> TwoWayKeyIdMap:
        mapping = cls()
        for key, entity_id in data.items():
            mapping.add(key, entity_id)
        return mapping

    def __len__(self) -> int:
        return len(self._id_by_key)
