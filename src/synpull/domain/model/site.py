"""Configured remote sources."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class Site:
    """A remote source identified by an integer id.

    ``status`` holds the raw stored value: one of the ``SiteStatus`` members or
    ``""`` when the site never recorded one.
    """

    id: int | None = None
    name: str
    status: str = ""
