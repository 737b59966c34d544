"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from synpull.adapters.sqlalchemy.mappings import (
    content_meta_table,
    site_option_table,
    site_table,
    term_relationship_table,
    term_table,
)
from synpull.config.pull import DEFAULT_TAXONOMIES
from synpull.domain.errors import ContentStoreError, StoreError, TaxonomyStoreError
from synpull.domain.model import LocalRecord, Site, Term, slugify

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from synpull.domain.model import TermRef

log = logging.getLogger(__name__)


def _encode_meta_value(value: object) -> str:
    return json.dumps(value, default=str, sort_keys=True, separators=(",", ":"))


def _decode_meta_value(value: str | None) -> object | None:
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError:
        return value


def _coerce_datetime(field_name: str, value: object) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        normalized = value.strip()
        if not normalized:
            return None
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(normalized)
        except ValueError as exc:
            raise ContentStoreError(f"Invalid {field_name}: {value!r}") from exc
    raise ContentStoreError(f"Invalid {field_name}: {value!r}")


class SqlAlchemyContentRepository:
    """Primary records of the local content store."""

    _DATETIME_FIELDS = frozenset({"published_at", "modified_at"})

    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(self, record_id: int) -> bool:
        return self.get(record_id) is not None

    def get(self, record_id: int) -> LocalRecord | None:
        return self.session.get(LocalRecord, record_id)

    def commit(self, payload: Mapping[str, Any]) -> int:
        fields = dict(payload)
        record_id = fields.pop("id", None)

        unknown = sorted(set(fields) - LocalRecord.WRITABLE_FIELDS)
        if unknown:
            raise ContentStoreError(f"Unknown post fields: {', '.join(unknown)}")
        for name in self._DATETIME_FIELDS & set(fields):
            fields[name] = _coerce_datetime(name, fields[name])
        fields.setdefault("modified_at", datetime.now(UTC))

        if record_id is None:
            record = self._insert(fields)
        else:
            record = self._update(int(record_id), fields)

        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise ContentStoreError(f"Could not store record: {exc}") from exc
        if record.id is None:
            raise ContentStoreError("Store did not assign a record id")
        return record.id

    def find_by_identifier(self, identifier: str, *, meta_key: str) -> int | None:
        # numeric identifiers may have been stored as JSON numbers
        candidates = sorted({_encode_meta_value(identifier), identifier})
        stmt = (
            select(content_meta_table.c.record_id)
            .where(content_meta_table.c.meta_key == meta_key)
            .where(content_meta_table.c.meta_value.in_(candidates))
            .order_by(content_meta_table.c.record_id)
            .limit(1)
        )
        try:
            record_id = self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"Identifier lookup failed: {exc}") from exc
        return record_id if isinstance(record_id, int) else None

    def _insert(self, fields: dict[str, Any]) -> LocalRecord:
        if not any(str(fields.get(name) or "").strip() for name in ("title", "content", "excerpt")):
            raise ContentStoreError("Content, title, and excerpt are empty")
        record = LocalRecord(**fields)
        self.session.add(record)
        return record

    def _update(self, record_id: int, fields: dict[str, Any]) -> LocalRecord:
        record = self.get(record_id)
        if record is None:
            raise ContentStoreError(f"Record {record_id} does not exist")
        for name, value in fields.items():
            setattr(record, name, value)
        return record


class SqlAlchemyMetadataRepository:
    """Key/value metadata rows attached to content records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def write(self, record_id: int, key: str, value: object) -> bool:
        if not key or self.session.get(LocalRecord, record_id) is None:
            return False
        try:
            encoded = _encode_meta_value(value)
        except (TypeError, ValueError):
            log.warning("Meta value for %r is not serialisable", key)
            return False

        existing = self.session.execute(
            select(content_meta_table.c.id, content_meta_table.c.meta_value)
            .where(content_meta_table.c.record_id == record_id)
            .where(content_meta_table.c.meta_key == key)
        ).one_or_none()

        try:
            if existing is None:
                self.session.execute(
                    insert(content_meta_table).values(
                        record_id=record_id, meta_key=key, meta_value=encoded
                    )
                )
            elif existing.meta_value != encoded:
                self.session.execute(
                    update(content_meta_table)
                    .where(content_meta_table.c.id == existing.id)
                    .values(meta_value=encoded)
                )
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not write meta {key!r}: {exc}") from exc
        return True

    def read(self, record_id: int, key: str) -> object | None:
        value = self.session.execute(
            select(content_meta_table.c.meta_value)
            .where(content_meta_table.c.record_id == record_id)
            .where(content_meta_table.c.meta_key == key)
        ).scalar_one_or_none()
        return _decode_meta_value(value)

    def all_for(self, record_id: int) -> dict[str, object]:
        rows = self.session.execute(
            select(content_meta_table.c.meta_key, content_meta_table.c.meta_value)
            .where(content_meta_table.c.record_id == record_id)
            .order_by(content_meta_table.c.meta_key)
        ).all()
        return {key: _decode_meta_value(value) for key, value in rows}


class SqlAlchemyTaxonomyRepository:
    """Terms and their assignment to content records."""

    def __init__(self, session: Session, *, taxonomies: Iterable[str] = DEFAULT_TAXONOMIES) -> None:
        self.session = session
        self._taxonomies = frozenset(taxonomies)

    def assign(self, record_id: int, taxonomy: str, terms: Iterable[TermRef]) -> bool:
        if taxonomy not in self._taxonomies:
            raise TaxonomyStoreError(f"Invalid taxonomy: {taxonomy!r}")
        if self.session.get(LocalRecord, record_id) is None:
            raise TaxonomyStoreError(f"Record {record_id} does not exist")

        try:
            term_ids = [self._resolve_term(taxonomy, term) for term in terms]
            wanted = list(dict.fromkeys(term_id for term_id in term_ids if term_id is not None))

            taxonomy_terms = select(term_table.c.id).where(term_table.c.taxonomy == taxonomy)
            self.session.execute(
                delete(term_relationship_table)
                .where(term_relationship_table.c.record_id == record_id)
                .where(term_relationship_table.c.term_id.in_(taxonomy_terms))
            )
            if wanted:
                self.session.execute(
                    insert(term_relationship_table),
                    [{"record_id": record_id, "term_id": term_id} for term_id in wanted],
                )
            self.session.flush()
        except SQLAlchemyError as exc:
            raise TaxonomyStoreError(f"Could not set {taxonomy!r} terms: {exc}") from exc
        return True

    def terms_for(self, record_id: int, taxonomy: str) -> list[Term]:
        stmt = (
            select(Term)
            .join(term_relationship_table, term_relationship_table.c.term_id == term_table.c.id)
            .where(term_relationship_table.c.record_id == record_id)
            .where(term_table.c.taxonomy == taxonomy)
            .order_by(term_table.c.name)
        )
        return list(self.session.execute(stmt).scalars())

    def _resolve_term(self, taxonomy: str, term: TermRef) -> int | None:
        if isinstance(term, int) and not isinstance(term, bool):
            existing = self.session.get(Term, term)
            if existing is None or existing.taxonomy != taxonomy:
                raise TaxonomyStoreError(f"Term {term} does not exist in {taxonomy!r}")
            return term

        name = str(term).strip()
        slug = slugify(name)
        if not slug:
            raise TaxonomyStoreError(f"Term name {name!r} has no usable slug")

        # a slug taken by a differently named term gets a numeric suffix
        candidate, suffix = slug, 1
        while True:
            found = self.session.execute(
                select(Term)
                .where(term_table.c.taxonomy == taxonomy)
                .where(term_table.c.slug == candidate)
            ).scalar_one_or_none()
            if found is None:
                break
            if found.name.casefold() == name.casefold():
                return found.id
            suffix += 1
            candidate = f"{slug}-{suffix}"

        created = Term(taxonomy=taxonomy, name=name, slug=candidate)
        self.session.add(created)
        self.session.flush()
        return created.id


class SqlAlchemySiteRepository:
    """Sites, their options and their stored status."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, site: Site) -> int:
        site.status = slugify(site.status)
        self.session.add(site)
        self.session.flush()
        if site.id is None:
            raise StoreError("Store did not assign a site id")
        return site.id

    def get(self, site_id: int) -> Site | None:
        return self.session.get(Site, site_id)

    def get_option(self, site_id: int, key: str) -> str | None:
        return self.session.execute(
            select(site_option_table.c.option_value)
            .where(site_option_table.c.site_id == site_id)
            .where(site_option_table.c.option_key == key)
        ).scalar_one_or_none()

    def set_option(self, site_id: int, key: str, value: str) -> None:
        if self.get(site_id) is None:
            raise StoreError(f"Site {site_id} does not exist")
        result = cast(
            "CursorResult[Any]",
            self.session.execute(
                update(site_option_table)
                .where(site_option_table.c.site_id == site_id)
                .where(site_option_table.c.option_key == key)
                .values(option_value=value)
            ),
        )
        if result.rowcount == 0:
            self.session.execute(
                insert(site_option_table).values(
                    site_id=site_id, option_key=key, option_value=value
                )
            )

    def get_status(self, site_id: int) -> str | None:
        status = self.session.execute(
            select(site_table.c.status).where(site_table.c.id == site_id)
        ).one_or_none()
        if status is None:
            return None
        return status[0] or ""

    def set_status(self, site_id: int, status: str) -> bool:
        result = cast(
            "CursorResult[Any]",
            self.session.execute(
                update(site_table).where(site_table.c.id == site_id).values(status=status)
            ),
        )
        return result.rowcount == 1

    def compare_and_set_status(
        self, site_id: int, expected: Collection[str], status: str
    ) -> bool:
        """Move the site to ``status`` only if its current status is in ``expected``.

        The check and the write are one conditional ``UPDATE``, so concurrent
        callers cannot both succeed.
        """

        result = cast(
            "CursorResult[Any]",
            self.session.execute(
                update(site_table)
                .where(site_table.c.id == site_id)
                .where(site_table.c.status.in_(list(expected)))
                .values(status=status)
            ),
        )
        return result.rowcount == 1


if TYPE_CHECKING:
    from synpull.domain.ports.persistence import (
        ContentRepository,
        MetadataRepository,
        SiteRepository,
        TaxonomyRepository,
    )

    _session_stub = cast("Session", object())
    _records_check: ContentRepository = SqlAlchemyContentRepository(_session_stub)
    _metadata_check: MetadataRepository = SqlAlchemyMetadataRepository(_session_stub)
    _terms_check: TaxonomyRepository = SqlAlchemyTaxonomyRepository(_session_stub)
    _sites_check: SiteRepository = SqlAlchemySiteRepository(_session_stub)
