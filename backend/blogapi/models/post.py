"""
Blog API Backend — Post Document Model
========================================

What:  In-process representation of a stored post and its document mapping.
How:   A dataclass with to_document() / from_document() converting to and from
       the dict layout kept in the `posts` collection.
Who:   Used by PostService to build inserts and read results.

Stored layout (one document per post):
    {
        "_id":        ObjectId,   assigned by the store, immutable
        "title":      str,
        "content":    str,
        "created_at": datetime,   UTC, set once at creation
        "updated_at": datetime,   UTC, refreshed on every update
    }

No schema is enforced by the store. Read policy in from_document():
    title, content  missing → ""  (the zero value of a text field)
    updated_at      missing → created_at
    created_at      missing → StoreFailureError (500)
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId

from blogapi.exceptions import StoreFailureError


def utc_now() -> datetime:
    """
    Current UTC time truncated to whole milliseconds.

    MongoDB stores datetimes with millisecond precision; truncating up front
    keeps the value returned by create equal to the value read back later.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def _as_utc(value: datetime) -> datetime:
    # Drivers without tz_aware hand back naive UTC datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class PostDocument:
    """A blog post as persisted in the document store."""

    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    id: Optional[ObjectId] = None

    @classmethod
    def new(cls, title: str, content: str) -> "PostDocument":
        """Fresh, unsaved post with created_at == updated_at."""
        now = utc_now()
        return cls(title=title, content=content, created_at=now, updated_at=now)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "PostDocument":
        """
        Map a stored document back to a PostDocument.

        Raises StoreFailureError when created_at is missing or not a datetime.
        """
        created_at = document.get("created_at")
        if not isinstance(created_at, datetime):
            raise StoreFailureError(
                message=f"Stored post {document.get('_id')} has no valid created_at",
                operation="decode",
            )
        created_at = _as_utc(created_at)
        updated_at = document.get("updated_at")
        return cls(
            id=document["_id"],
            title=document.get("title") or "",
            content=document.get("content") or "",
            created_at=created_at,
            updated_at=_as_utc(updated_at) if isinstance(updated_at, datetime) else created_at,
        )

    def to_document(self) -> Dict[str, Any]:
        """Document for insertion. `_id` is left to the store when unset."""
        document: Dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.id is not None:
            document["_id"] = self.id
        return document

    def __repr__(self) -> str:
        return (
            f"<PostDocument(id={self.id}, title={self.title!r}, "
            f"updated_at='{self.updated_at}')>"
        )
