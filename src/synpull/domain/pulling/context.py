"""Explicit provenance threaded through a pull."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PullContext:
    """Which site the posts being reconciled came from."""

    site_id: int
    transport_type: str | None = None
