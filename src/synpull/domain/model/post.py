"""Transient representation of a syndicated item."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


type TermRef = str | int


@dataclass(eq=False, kw_only=True)
class Post:
    """One pulled content item travelling from a remote source to the local store.

    ``remote_id`` is stable across pulls of the same logical item. ``local_id``
    stays ``None`` until the identity resolver finds an existing record or the
    first insert assigns one.
    """

    remote_id: str
    local_id: int | None = None
    primary_fields: dict[str, Any] = field(default_factory=dict[str, Any])
    metadata: dict[str, Any] = field(default_factory=dict[str, Any])
    taxonomy_assignments: dict[str, list[TermRef]] = field(
        default_factory=dict[str, list[TermRef]]
    )

    def __post_init__(self) -> None:
        self.remote_id = "" if self.remote_id is None else str(self.remote_id)

    @property
    def is_resolved(self) -> bool:
        return self.local_id is not None
