"""Translate RSS payloads into posts."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from synpull.config.pull import IDENTIFIER_META_KEY
from synpull.domain.model import Post, PostStatus

if TYPE_CHECKING:
    from .schema import RssItemPayload

log = getLogger(__name__)

SOURCE_URL_META_KEY = "syn_source_url"
SOURCE_SITE_META_KEY = "syn_source_site_id"


def parse_post(
    item: RssItemPayload,
    *,
    site_id: int,
    post_status: str = PostStatus.DRAFT,
    post_type: str = "post",
) -> Post | None:
    """Build a ``Post`` from one feed item, or ``None`` when it has no stable identity."""

    remote_id = item.remote_id
    if remote_id is None:
        log.warning("Skipping feed item %r without guid or link", item.title)
        return None

    primary_fields: dict[str, Any] = {
        "title": item.title,
        "content": item.content_encoded or item.description,
        "excerpt": item.description,
        "status": str(post_status),
        "post_type": post_type,
        "guid": remote_id,
    }
    if item.pub_date is not None:
        primary_fields["published_at"] = item.pub_date

    metadata: dict[str, Any] = {
        IDENTIFIER_META_KEY: remote_id,
        SOURCE_SITE_META_KEY: site_id,
    }
    if item.link:
        metadata[SOURCE_URL_META_KEY] = item.link

    taxonomy_assignments: dict[str, list[str | int]] = {}
    if item.categories:
        taxonomy_assignments["category"] = list(dict.fromkeys(item.categories))

    return Post(
        remote_id=remote_id,
        primary_fields=primary_fields,
        metadata=metadata,
        taxonomy_assignments=taxonomy_assignments,
    )
