"""Explicit map from transport type to pull client."""

from __future__ import annotations

from typing import TYPE_CHECKING

from synpull.domain.model import slugify

if TYPE_CHECKING:
    from synpull.domain.ports.fetching import PullClient


class PullClientRegistry:
    """Registered pull clients keyed by normalized transport type."""

    def __init__(self, clients: dict[str, PullClient] | None = None) -> None:
        self._clients: dict[str, PullClient] = {}
        for transport_type, client in (clients or {}).items():
            self.register(transport_type, client)

    def register(self, transport_type: str, client: PullClient, *, replace: bool = False) -> None:
        key = slugify(transport_type)
        if not key:
            raise ValueError("Transport type must not be blank")
        if key in self._clients and not replace:
            raise ValueError(f"Pull client already registered for {key!r}")
        self._clients[key] = client

    def get(self, transport_type: str | None) -> PullClient | None:
        if not transport_type:
            return None
        return self._clients.get(slugify(transport_type))

    def transport_types(self) -> tuple[str, ...]:
        return tuple(sorted(self._clients))

    def __contains__(self, transport_type: object) -> bool:
        return isinstance(transport_type, str) and self.get(transport_type) is not None

    def __len__(self) -> int:
        return len(self._clients)
