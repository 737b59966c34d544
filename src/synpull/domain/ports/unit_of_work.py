"""Transaction boundary used by the pulling services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from synpull.domain.ports.persistence import (
        ContentRepository,
        MetadataRepository,
        SiteRepository,
        TaxonomyRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Repositories that share one transaction."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Context manager exposing repositories; callers commit explicitly."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class SyndicationRepositories(RepositoryCollection):
    """Repositories required to pull and reconcile posts."""

    records: ContentRepository
    metadata: MetadataRepository
    terms: TaxonomyRepository
    sites: SiteRepository


type SyndicationUnitOfWork = UnitOfWork[SyndicationRepositories]
