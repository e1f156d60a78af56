"""
Blog API Backend — Typed Document Queries
===========================================

What:  Small immutable query objects describing every store access the API makes.
How:   Services build one of these; store adapters translate them into
       driver-level filters/updates via to_filter() / to_update().
Who:   Built by PostService, consumed by DocumentStore implementations.

Query Inventory:
    ById          → {"_id": ObjectId(...)}       (get, update, delete)
    AllDocuments  → {}                           (list)
    SetFields     → {"$set": {...}}              (update)
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from bson import ObjectId

from blogapi.exceptions import MalformedIdentifierError

# Fields that are written once at creation and never through an update.
IMMUTABLE_FIELDS = frozenset({"_id", "id", "created_at"})

# bytes.fromhex (used by ObjectId) skips whitespace, so match the text itself
_OBJECT_ID_HEX = re.compile(r"[0-9a-fA-F]{24}")


@dataclass(frozen=True)
class ById:
    """Matches exactly one document by its primary key."""

    object_id: ObjectId

    @classmethod
    def parse(cls, raw: str) -> "ById":
        """
        Build a ById query from a path parameter.

        Only a 24-character hexadecimal string is accepted. Raises
        MalformedIdentifierError otherwise; no store is touched.
        """
        if not isinstance(raw, str) or not _OBJECT_ID_HEX.fullmatch(raw):
            raise MalformedIdentifierError(raw_id=str(raw))
        return cls(ObjectId(raw))

    def to_filter(self) -> Dict[str, Any]:
        return {"_id": self.object_id}

    def __str__(self) -> str:
        return str(self.object_id)


@dataclass(frozen=True)
class AllDocuments:
    """Full-collection scan in the store's natural order."""

    def to_filter(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class SetFields:
    """
    Partial update that overwrites only the listed fields.

    Raises ValueError when asked to set an immutable field (_id, created_at).
    """

    fields: Mapping[str, Any]

    def __post_init__(self) -> None:
        forbidden = IMMUTABLE_FIELDS.intersection(self.fields)
        if forbidden:
            raise ValueError(f"Cannot update immutable field(s): {sorted(forbidden)}")
        if not self.fields:
            raise ValueError("SetFields requires at least one field")

    def to_update(self) -> Dict[str, Any]:
        return {"$set": dict(self.fields)}
