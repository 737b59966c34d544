"""Public interface for the RSS adapter."""

from __future__ import annotations

from .client import FEED_URL_OPTION, TRANSPORT_TYPE, RssPullClient
from .schema import RssChannelPayload, RssItemPayload, parse_feed
from .translator import parse_post

__all__ = [
    "FEED_URL_OPTION",
    "TRANSPORT_TYPE",
    "RssChannelPayload",
    "RssItemPayload",
    "RssPullClient",
    "parse_feed",
    "parse_post",
]
