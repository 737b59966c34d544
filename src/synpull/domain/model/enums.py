"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SiteStatus(StrEnum):
    """Observable per-site states.

    An empty stored value means the site never recorded a status and is
    treated like ``IDLE`` when a pull wants to start.
    """

    IDLE = "idle"
    PULLING = "pulling"
    PUSHING = "pushing"
    PROCESSING = "processing"


class PostStatus(StrEnum):
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISH = "publish"
    PRIVATE = "private"
    FUTURE = "future"
