"""Persisted entities of the local content store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class LocalRecord:
    """Primary record of a post in the local content store."""

    WRITABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "title",
            "content",
            "excerpt",
            "status",
            "post_type",
            "published_at",
            "modified_at",
            "guid",
        }
    )

    id: int | None = None
    title: str = ""
    content: str = ""
    excerpt: str = ""
    status: str = "draft"
    post_type: str = "post"
    guid: str | None = None
    published_at: datetime | None = None
    modified_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class Term:
    id: int | None = None
    taxonomy: str
    name: str
    slug: str
