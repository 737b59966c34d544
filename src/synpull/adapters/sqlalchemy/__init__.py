"""SQLAlchemy adapter package for synpull."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyContentRepository,
    SqlAlchemyMetadataRepository,
    SqlAlchemySiteRepository,
    SqlAlchemyTaxonomyRepository,
)
from .unit_of_work import (
    SqlAlchemySyndicationUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyContentRepository",
    "SqlAlchemyMetadataRepository",
    "SqlAlchemySiteRepository",
    "SqlAlchemySyndicationUnitOfWork",
    "SqlAlchemyTaxonomyRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
