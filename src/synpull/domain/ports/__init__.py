"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import PullClient
from .hooks import PreCommitHooks
from .persistence import (
    ContentRepository,
    MetadataRepository,
    SiteRepository,
    TaxonomyRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    SyndicationRepositories,
    SyndicationUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ContentRepository",
    "MetadataRepository",
    "PreCommitHooks",
    "PullClient",
    "RepositoryCollection",
    "SiteRepository",
    "SyndicationRepositories",
    "SyndicationUnitOfWork",
    "TaxonomyRepository",
    "UnitOfWork",
]
