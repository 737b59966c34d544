"""Ports for fetching posts from remote sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from synpull.domain.model import Post
    from synpull.domain.pulling.context import PullContext


@runtime_checkable
class PullClient(Protocol):
    """Transport capability: fetch the current posts of a site."""

    def fetch(self, site_id: int, context: PullContext) -> Sequence[Post]: ...


__all__ = ["PullClient"]
