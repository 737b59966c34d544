"""Pull client reading a site's RSS 2.0 feed over HTTP."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from xml.etree import ElementTree

import httpx

from synpull.config.pull import DEFAULT_HTTP_TIMEOUT_SECONDS
from synpull.domain.errors import PullClientError
from synpull.domain.model import PostStatus

from .schema import parse_feed
from .translator import parse_post

if TYPE_CHECKING:
    from collections.abc import Callable

    from synpull.domain.model import Post
    from synpull.domain.ports.unit_of_work import SyndicationUnitOfWork
    from synpull.domain.pulling.context import PullContext

log = getLogger(__name__)

TRANSPORT_TYPE = "rss"
FEED_URL_OPTION = "syn_feed_url"
DEFAULT_POST_STATUS_OPTION = "syn_default_post_status"
DEFAULT_POST_TYPE_OPTION = "syn_default_post_type"
_USER_AGENT = "synpull-rss/1.0"


def _default_http_client_factory(timeout_seconds: float) -> httpx.Client:
    return httpx.Client(
        timeout=timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": _USER_AGENT},
    )


@dataclass(frozen=True, slots=True)
class _FeedSettings:
    feed_url: str
    post_status: str
    post_type: str


@dataclass(slots=True)
class RssPullClient:
    """Fetch and translate the items of the feed configured for a site."""

    unit_of_work_factory: Callable[[], SyndicationUnitOfWork]
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    http_client_factory: Callable[[float], httpx.Client] = field(
        default=_default_http_client_factory
    )

    def fetch(self, site_id: int, context: PullContext) -> list[Post]:
        _ = context
        settings = self._load_settings(site_id)
        document = self._download(settings.feed_url)

        try:
            channel = parse_feed(document)
        except (ElementTree.ParseError, ValueError) as exc:
            raise PullClientError(f"Could not parse feed {settings.feed_url}: {exc}") from exc

        posts: list[Post] = []
        for item in channel.items:
            post = parse_post(
                item,
                site_id=site_id,
                post_status=settings.post_status,
                post_type=settings.post_type,
            )
            if post is not None:
                posts.append(post)

        log.info(
            "Fetched %s posts (%s items) from %s", len(posts), len(channel.items), settings.feed_url
        )
        return posts

    def _load_settings(self, site_id: int) -> _FeedSettings:
        with self.unit_of_work_factory() as uow:
            sites = uow.repositories.sites
            feed_url = sites.get_option(site_id, FEED_URL_OPTION)
            post_status = sites.get_option(site_id, DEFAULT_POST_STATUS_OPTION)
            post_type = sites.get_option(site_id, DEFAULT_POST_TYPE_OPTION)

        if not feed_url or not feed_url.strip():
            raise PullClientError(f"Site {site_id} has no {FEED_URL_OPTION} configured")
        return _FeedSettings(
            feed_url=feed_url.strip(),
            post_status=post_status or PostStatus.DRAFT.value,
            post_type=post_type or "post",
        )

    def _download(self, feed_url: str) -> bytes:
        try:
            with self.http_client_factory(self.timeout_seconds) as client:
                response = client.get(feed_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PullClientError(f"Could not fetch feed {feed_url}: {exc}") from exc
        return response.content

