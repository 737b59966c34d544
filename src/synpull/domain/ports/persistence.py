"""Ports for the local content store and site configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from synpull.domain.model import LocalRecord, Site, Term, TermRef


@runtime_checkable
class ContentRepository(Protocol):
    """Primary records of the local content store."""

    def exists(self, record_id: int) -> bool: ...

    def get(self, record_id: int) -> LocalRecord | None: ...

    def commit(self, payload: Mapping[str, Any]) -> int:
        """Insert, or update when ``payload`` carries an ``id``; return the record id.

        Raises ``ContentStoreError`` when the payload is rejected.
        """
        ...

    def find_by_identifier(self, identifier: str, *, meta_key: str) -> int | None:
        """Return the id of at most one record whose ``meta_key`` equals ``identifier``."""
        ...


@runtime_checkable
class MetadataRepository(Protocol):
    """Key/value pairs attached to local records."""

    def write(self, record_id: int, key: str, value: object) -> bool: ...

    def read(self, record_id: int, key: str) -> object | None: ...

    def all_for(self, record_id: int) -> dict[str, object]: ...


@runtime_checkable
class TaxonomyRepository(Protocol):
    """Term assignments of local records."""

    def assign(self, record_id: int, taxonomy: str, terms: Iterable[TermRef]) -> bool:
        """Replace the record's terms in ``taxonomy``.

        Raises ``TaxonomyStoreError`` when the store rejects the assignment.
        """
        ...

    def terms_for(self, record_id: int, taxonomy: str) -> list[Term]: ...


@runtime_checkable
class SiteRepository(Protocol):
    """Configured sites, their options and their durable status."""

    def add(self, site: Site) -> int: ...

    def get(self, site_id: int) -> Site | None: ...

    def get_option(self, site_id: int, key: str) -> str | None: ...

    def set_option(self, site_id: int, key: str, value: str) -> None: ...

    def get_status(self, site_id: int) -> str | None: ...

    def set_status(self, site_id: int, status: str) -> bool: ...

    def compare_and_set_status(
        self, site_id: int, expected: Collection[str], status: str
    ) -> bool: ...
