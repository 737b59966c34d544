"""Reusable fakes and helpers for pull and reconciliation tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from synpull.domain.errors import ContentStoreError, StoreError, TaxonomyStoreError
from synpull.domain.model import LocalRecord, Post, Site, Term, slugify

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Mapping, Sequence

    from synpull.domain.model import TermRef
    from synpull.domain.pulling.context import PullContext


def make_post(
    remote_id: str = "abc",
    *,
    title: str = "A",
    local_id: int | None = None,
    metadata: dict[str, Any] | None = None,
    terms: dict[str, list[TermRef]] | None = None,
) -> Post:
    """Create a post with minimal primary fields."""

    return Post(
        remote_id=remote_id,
        local_id=local_id,
        primary_fields={"title": title},
        metadata=dict(metadata or {}),
        taxonomy_assignments=dict(terms or {}),
    )


class FakeContentRepository:
    """In-memory primary records."""

    def __init__(self, metadata: FakeMetadataRepository) -> None:
        self.records: dict[int, dict[str, Any]] = {}
        self.commits: list[dict[str, Any]] = []
        self.fail_commit = False
        self._metadata = metadata
        self._next_id = 1

    def exists(self, record_id: int) -> bool:
        return record_id in self.records

    def get(self, record_id: int) -> LocalRecord | None:
        fields = self.records.get(record_id)
        if fields is None:
            return None
        return LocalRecord(id=record_id, **fields)

    def commit(self, payload: Mapping[str, Any]) -> int:
        self.commits.append(dict(payload))
        if self.fail_commit:
            raise ContentStoreError("commit rejected")
        fields = dict(payload)
        record_id = fields.pop("id", None)
        if record_id is None:
            record_id = self._next_id
            self._next_id += 1
            self.records[record_id] = fields
            return record_id
        if record_id not in self.records:
            raise ContentStoreError(f"Record {record_id} does not exist")
        self.records[record_id].update(fields)
        return record_id

    def find_by_identifier(self, identifier: str, *, meta_key: str) -> int | None:
        for record_id in sorted(self._metadata.values):
            if self._metadata.values[record_id].get(meta_key) == identifier:
                return record_id
        return None


class FakeMetadataRepository:
    """In-memory metadata with optional failure injection per key."""

    def __init__(
        self, *, fail_keys: Collection[str] = (), raise_keys: Collection[str] = ()
    ) -> None:
        self.values: dict[int, dict[str, object]] = {}
        self.writes: list[tuple[int, str, object]] = []
        self.fail_keys = set(fail_keys)
        self.raise_keys = set(raise_keys)

    def write(self, record_id: int, key: str, value: object) -> bool:
        if key in self.raise_keys:
            raise StoreError(f"meta {key} rejected")
        if key in self.fail_keys:
            return False
        self.writes.append((record_id, key, value))
        self.values.setdefault(record_id, {})[key] = value
        return True

    def read(self, record_id: int, key: str) -> object | None:
        return self.values.get(record_id, {}).get(key)

    def all_for(self, record_id: int) -> dict[str, object]:
        return dict(self.values.get(record_id, {}))


class FakeTaxonomyRepository:
    """In-memory term assignments with optional failure injection per taxonomy."""

    def __init__(self, *, fail_taxonomies: Collection[str] = ()) -> None:
        self.assignments: dict[tuple[int, str], list[TermRef]] = {}
        self.fail_taxonomies = set(fail_taxonomies)

    def assign(self, record_id: int, taxonomy: str, terms: Iterable[TermRef]) -> bool:
        if taxonomy in self.fail_taxonomies:
            raise TaxonomyStoreError(f"Invalid taxonomy: {taxonomy!r}")
        self.assignments[(record_id, taxonomy)] = list(terms)
        return True

    def terms_for(self, record_id: int, taxonomy: str) -> list[Term]:
        return [
            Term(taxonomy=taxonomy, name=str(term), slug=slugify(term))
            for term in self.assignments.get((record_id, taxonomy), [])
        ]


class FakeSiteRepository:
    """In-memory sites recording every status transition."""

    def __init__(self) -> None:
        self.sites: dict[int, Site] = {}
        self.options: dict[tuple[int, str], str] = {}
        self.transitions: list[tuple[int, str]] = []
        self._next_id = 1

    def add(self, site: Site) -> int:
        site_id = site.id if site.id is not None else self._next_id
        self._next_id = max(self._next_id, site_id) + 1
        site.id = site_id
        self.sites[site_id] = site
        return site_id

    def get(self, site_id: int) -> Site | None:
        return self.sites.get(site_id)

    def get_option(self, site_id: int, key: str) -> str | None:
        return self.options.get((site_id, key))

    def set_option(self, site_id: int, key: str, value: str) -> None:
        if site_id not in self.sites:
            raise StoreError(f"Site {site_id} does not exist")
        self.options[(site_id, key)] = value

    def get_status(self, site_id: int) -> str | None:
        site = self.sites.get(site_id)
        return None if site is None else site.status

    def set_status(self, site_id: int, status: str) -> bool:
        site = self.sites.get(site_id)
        if site is None:
            return False
        site.status = status
        self.transitions.append((site_id, status))
        return True

    def compare_and_set_status(
        self, site_id: int, expected: Collection[str], status: str
    ) -> bool:
        site = self.sites.get(site_id)
        if site is None or site.status not in expected:
            return False
        return self.set_status(site_id, status)


@dataclass(slots=True)
class FakeRepositories:
    metadata: FakeMetadataRepository = field(default_factory=FakeMetadataRepository)
    terms: FakeTaxonomyRepository = field(default_factory=FakeTaxonomyRepository)
    sites: FakeSiteRepository = field(default_factory=FakeSiteRepository)
    records: FakeContentRepository = field(init=False)

    def __post_init__(self) -> None:
        self.records = FakeContentRepository(self.metadata)


class FakeUnitOfWork:
    """Unit of work over shared in-memory repositories."""

    def __init__(self, repositories: FakeRepositories, journal: list[str]) -> None:
        self.repositories = repositories
        self._journal = journal

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: object | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self._journal.append("commit")

    def rollback(self) -> None:
        self._journal.append("rollback")


@dataclass(slots=True)
class FakeStore:
    """Factory handing out units of work that share one set of repositories."""

    repositories: FakeRepositories = field(default_factory=FakeRepositories)
    journal: list[str] = field(default_factory=list[str])

    def __call__(self) -> FakeUnitOfWork:
        return FakeUnitOfWork(self.repositories, self.journal)

    def add_site(
        self,
        *,
        site_id: int = 42,
        status: str = "",
        transport_type: str | None = "rss",
        options: Mapping[str, str] | None = None,
    ) -> int:
        sites = self.repositories.sites
        added = sites.add(Site(id=site_id, name=f"site-{site_id}", status=status))
        if transport_type is not None:
            sites.set_option(added, "syn_transport_type", transport_type)
        for key, value in (options or {}).items():
            sites.set_option(added, key, value)
        return added


class FakePullClient:
    """Pull client returning canned posts and recording calls."""

    def __init__(
        self,
        posts: Sequence[Post] | None = None,
        *,
        error: Exception | None = None,
        on_fetch: Callable[[int], None] | None = None,
    ) -> None:
        self._posts = list(posts or [])
        self._error = error
        self._on_fetch = on_fetch
        self.calls: list[tuple[int, PullContext]] = []

    def fetch(self, site_id: int, context: PullContext) -> list[Post]:
        self.calls.append((site_id, context))
        if self._on_fetch is not None:
            self._on_fetch(site_id)
        if self._error is not None:
            raise self._error
        return list(self._posts)


if TYPE_CHECKING:
    from synpull.domain.ports.fetching import PullClient
    from synpull.domain.ports.unit_of_work import SyndicationUnitOfWork

    _check_client: PullClient = FakePullClient()
    _check_uow: SyndicationUnitOfWork = FakeStore()()
