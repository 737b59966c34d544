"""SQLAlchemy mapping metadata for the synpull domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from synpull.domain.model import LocalRecord, Site, Term

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Content -----------------------------------------------------------------------

content_record_table = Table(
    "content_record",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False, default=""),
    Column("content", Text, nullable=False, default=""),
    Column("excerpt", Text, nullable=False, default=""),
    Column("status", String(20), nullable=False, default="draft"),
    Column("post_type", String(20), nullable=False, default="post"),
    Column("guid", String, nullable=True),
    Column("published_at", UTCDateTime, nullable=True),
    Column("modified_at", UTCDateTime, nullable=True),
)

content_meta_table = Table(
    "content_meta",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "record_id",
        Integer,
        ForeignKey("content_record.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("meta_key", String(255), nullable=False),
    Column("meta_value", Text, nullable=True),
    UniqueConstraint("record_id", "meta_key"),
    Index("ix_content_meta_key_value", "meta_key", "meta_value"),
)

# Taxonomy ----------------------------------------------------------------------

term_table = Table(
    "term",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("taxonomy", String(32), nullable=False),
    Column("name", String(200), nullable=False),
    Column("slug", String(200), nullable=False),
    UniqueConstraint("taxonomy", "slug"),
)

term_relationship_table = Table(
    "term_relationship",
    mapper_registry.metadata,
    Column(
        "record_id",
        Integer,
        ForeignKey("content_record.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("term_id", Integer, ForeignKey("term.id", ondelete="CASCADE"), primary_key=True),
)

# Sites -------------------------------------------------------------------------

site_table = Table(
    "site",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("status", String(20), nullable=False, default=""),
)

site_option_table = Table(
    "site_option",
    mapper_registry.metadata,
    Column("site_id", Integer, ForeignKey("site.id", ondelete="CASCADE"), primary_key=True),
    Column("option_key", String(255), primary_key=True),
    Column("option_value", Text, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(LocalRecord, content_record_table)
    mapper_registry.map_imperatively(Term, term_table)
    mapper_registry.map_imperatively(Site, site_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
