"""Domain model for synpull."""

from __future__ import annotations

from .enums import PostStatus, SiteStatus
from .post import Post, TermRef
from .record import LocalRecord, Term
from .site import Site
from .slugs import slugify

__all__ = [
    "LocalRecord",
    "Post",
    "PostStatus",
    "Site",
    "SiteStatus",
    "Term",
    "TermRef",
    "slugify",
]
