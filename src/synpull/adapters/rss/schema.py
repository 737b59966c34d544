"""Pydantic models describing RSS 2.0 feed items."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any
from xml.etree import ElementTree

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
DC_NS = "http://purl.org/dc/elements/1.1/"

log = logging.getLogger(__name__)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class RssBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RssItemPayload(RssBaseModel):
    title: str = ""
    link: str | None = None
    guid: str | None = None
    description: str = ""
    content_encoded: str | None = Field(default=None, alias="content:encoded")
    author: str | None = None
    pub_date: datetime | None = Field(default=None, alias="pubDate")
    categories: list[str] = Field(default_factory=list[str])

    _normalize_optional = field_validator(
        "link", "guid", "content_encoded", "author", mode="before"
    )(_blank_to_none)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("pub_date", mode="before")
    @classmethod
    def _parse_rfc822(cls, value: object) -> object:
        value = _blank_to_none(value)
        if not isinstance(value, str):
            return value
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)

    @field_validator("categories", mode="before")
    @classmethod
    def _drop_blank_categories(cls, value: object) -> object:
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return value

    @property
    def remote_id(self) -> str | None:
        return self.guid or self.link


class RssChannelPayload(RssBaseModel):
    title: str = ""
    link: str | None = None
    items: list[RssItemPayload] = Field(default_factory=list[RssItemPayload])


def _item_to_mapping(element: ElementTree.Element) -> dict[str, Any]:
    def text(tag: str) -> str | None:
        found = element.find(tag)
        return found.text if found is not None else None

    return {
        "title": text("title"),
        "link": text("link"),
        "guid": text("guid"),
        "description": text("description"),
        "content:encoded": text(f"{{{CONTENT_NS}}}encoded"),
        "author": text("author") or text(f"{{{DC_NS}}}creator"),
        "pubDate": text("pubDate"),
        "categories": [category.text or "" for category in element.findall("category")],
    }


def parse_feed(document: str | bytes) -> RssChannelPayload:
    """Parse an RSS 2.0 document into a validated channel payload.

    Items that fail validation are logged and left out. Raises
    ``ElementTree.ParseError`` for malformed XML and ``ValueError`` when the
    document has no ``<channel>``.
    """

    root = ElementTree.fromstring(document)
    channel = root.find("channel")
    if channel is None:
        raise ValueError("Feed has no <channel> element")

    items: list[RssItemPayload] = []
    for position, element in enumerate(channel.findall("item")):
        try:
            items.append(RssItemPayload.model_validate(_item_to_mapping(element)))
        except ValidationError:
            log.warning("Skipping invalid feed item at position %s", position, exc_info=True)

    return RssChannelPayload(
        title=(channel.findtext("title") or "").strip(),
        link=_blank_to_none(channel.findtext("link")),  # pyright: ignore[reportArgumentType]
        items=items,
    )
