"""SQLAlchemy-backed units of work for pulls.

``startup()`` binds the adapter to one engine for the life of the process.
Each unit of work then opens its own session; callers commit explicitly and
an exception leaving the ``with`` block rolls back whatever was not committed.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from synpull.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from synpull.adapters.sqlalchemy.repositories import (
    SqlAlchemyContentRepository,
    SqlAlchemyMetadataRepository,
    SqlAlchemySiteRepository,
    SqlAlchemyTaxonomyRepository,
)
from synpull.config.pull import DEFAULT_TAXONOMIES
from synpull.config.storage import get_database_config
from synpull.domain.ports.unit_of_work import RepositoryCollection, SyndicationRepositories

if TYPE_CHECKING:
    from collections.abc import Iterable
    from sqlite3 import Connection as SQLiteConnection
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter is used before ``startup()`` or configured twice."""


@dataclass(frozen=True, slots=True)
class _Binding:
    engine: Engine
    sessions: sessionmaker[Session]


_binding: _Binding | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: SQLiteConnection, _record: object) -> None:
    # cascades on content_meta and term_relationship depend on it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine(database_uri: str | None) -> Engine:
    config = get_database_config()
    uri = database_uri or config.uri
    engine = create_engine(uri, echo=config.echo, future=True)
    if uri.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Map the domain model, create missing tables and bind the session factory."""

    global _binding  # noqa: PLW0603
    if _binding is not None and not force:
        raise StartupError("SQLAlchemy adapter already started; pass force=True to rebind")

    bound_engine = engine or _create_engine(database_uri)
    start_mappers()
    create_all_tables(bound_engine)
    _binding = _Binding(
        engine=bound_engine,
        sessions=sessionmaker(bind=bound_engine, expire_on_commit=False),
    )
    log.debug("SQLAlchemy adapter bound to %s", bound_engine.url)


def configured_engine() -> Engine | None:
    return None if _binding is None else _binding.engine


def is_started() -> bool:
    return _binding is not None


def shutdown() -> None:
    """Dispose the bound engine; mostly used between tests."""

    global _binding  # noqa: PLW0603
    if _binding is not None:
        _binding.engine.dispose()
    _binding = None


def _session_factory() -> sessionmaker[Session]:
    if _binding is None:
        raise StartupError(
            "SQLAlchemy adapter not started; call "
            "synpull.adapters.sqlalchemy.unit_of_work.startup() first"
        )
    return _binding.sessions


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session plus the repositories built on top of it."""

    def __init__(self) -> None:
        self._sessions = _session_factory()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._sessions()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemySyndicationUnitOfWork(BaseSqlAlchemyUnitOfWork[SyndicationRepositories]):
    """Records, metadata, terms and sites sharing one session."""

    def __init__(self, *, taxonomies: Iterable[str] = DEFAULT_TAXONOMIES) -> None:
        super().__init__()
        self._taxonomies = tuple(taxonomies)

    def _build_repositories(self, session: Session) -> SyndicationRepositories:
        return SyndicationRepositories(
            records=SqlAlchemyContentRepository(session),
            metadata=SqlAlchemyMetadataRepository(session),
            terms=SqlAlchemyTaxonomyRepository(session, taxonomies=self._taxonomies),
            sites=SqlAlchemySiteRepository(session),
        )


if TYPE_CHECKING:
    from synpull.domain.ports.unit_of_work import SyndicationUnitOfWork

    _uow_check: SyndicationUnitOfWork = SqlAlchemySyndicationUnitOfWork()
