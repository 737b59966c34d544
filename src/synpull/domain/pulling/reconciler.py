"""Reconcile pulled posts against the local content store.

Each post goes through the same ordered steps:

1. resolve ``local_id`` from the syndication identifier when it is missing,
2. check that a set ``local_id`` still points at an existing record,
3. commit the primary fields (insert or update),
4. write the metadata pairs,
5. replace the taxonomy assignments.

Steps fail fast. Every successful write is committed right away, so a failure
in a later step leaves the earlier ones in place; nothing is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from synpull.config.pull import IDENTIFIER_META_KEY
from synpull.domain.errors import (
    InvalidBatchInput,
    MetadataWriteFailed,
    MissingLocalRecord,
    PrimaryCommitFailed,
    ReconcileError,
    StoreError,
    TaxonomyWriteFailed,
)
from synpull.domain.model import Post
from synpull.domain.ports.hooks import PreCommitHooks
from synpull.domain.pulling.identity import IdentityResolver

if TYPE_CHECKING:
    from collections.abc import Callable

    from synpull.domain.model import TermRef
    from synpull.domain.ports.unit_of_work import SyndicationUnitOfWork
    from synpull.domain.pulling.context import PullContext

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ItemFailure:
    index: int
    post: Post
    error: ReconcileError


@dataclass(slots=True)
class ReconcileReport:
    """Outcome of reconciling a batch of posts."""

    created: list[Post] = field(default_factory=list[Post])
    updated: list[Post] = field(default_factory=list[Post])
    failures: list[ItemFailure] = field(default_factory=list[ItemFailure])

    @property
    def total(self) -> int:
        return len(self.created) + len(self.updated) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


class PostReconciler:
    """Insert or update local records for pulled posts."""

    def __init__(
        self,
        unit_of_work_factory: Callable[[], SyndicationUnitOfWork],
        *,
        hooks: PreCommitHooks | None = None,
        identifier_meta_key: str = IDENTIFIER_META_KEY,
        fail_fast: bool = True,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._hooks = hooks or PreCommitHooks()
        self._identifier_meta_key = identifier_meta_key
        self._fail_fast = fail_fast

    def process_posts(
        self,
        posts: Iterable[Post],
        context: PullContext,
        *,
        fail_fast: bool | None = None,
    ) -> ReconcileReport:
        """Reconcile every post of a batch.

        With ``fail_fast`` the first failure propagates and stops the batch.
        Otherwise failures are collected in the report and iteration goes on.
        """

        batch = _materialize_batch(posts)
        stop_on_error = self._fail_fast if fail_fast is None else fail_fast
        report = ReconcileReport()

        for index, post in enumerate(batch):
            try:
                updated = self._reconcile(post, context)
            except ReconcileError as exc:
                if stop_on_error:
                    raise
                log.warning("Skipping post %r of site %s: %s", post.remote_id, context.site_id, exc)
                report.failures.append(ItemFailure(index=index, post=post, error=exc))
                continue
            (report.updated if updated else report.created).append(post)

        log.info(
            "Reconciled %s posts for site %s: created=%s, updated=%s, failed=%s",
            report.total,
            context.site_id,
            len(report.created),
            len(report.updated),
            len(report.failures),
        )
        return report

    def process_post(self, post: Post, context: PullContext) -> Post:
        self._reconcile(post, context)
        return post

    def _reconcile(self, post: Post, context: PullContext) -> bool:
        """Run all steps for ``post``; return whether an existing record was updated."""

        with self._uow_factory() as uow:
            records = uow.repositories.records

            if post.local_id is None:
                resolver = IdentityResolver(records, meta_key=self._identifier_meta_key)
                local_id = resolver.resolve_local_id(post.remote_id)
                if local_id is not None:
                    post.local_id = local_id

            if post.local_id is not None:
                if not records.exists(post.local_id):
                    raise MissingLocalRecord(
                        f"Local record {post.local_id} does not exist",
                        remote_id=post.remote_id,
                        local_id=post.local_id,
                    )
            updating = post.local_id is not None

            self._commit_primary(uow, post, context)
            self._commit_metadata(uow, post, context)
            self._commit_terms(uow, post, context)

        log.debug("Reconciled post %r as record %s", post.remote_id, post.local_id)
        return updating

    def _commit_primary(
        self, uow: SyndicationUnitOfWork, post: Post, context: PullContext
    ) -> None:
        payload: dict[str, Any] = dict(post.primary_fields)
        if post.local_id is not None:
            payload["id"] = post.local_id
        payload = self._hooks.before_insert_post(payload, context)

        try:
            record_id = uow.repositories.records.commit(payload)
        except StoreError as exc:
            raise PrimaryCommitFailed(
                f"Could not commit post {post.remote_id!r}: {exc}",
                remote_id=post.remote_id,
                local_id=post.local_id,
            ) from exc
        uow.commit()

        if post.local_id is None:
            log.info("Created record %s for post %r", record_id, post.remote_id)
        post.local_id = record_id

    def _commit_metadata(
        self, uow: SyndicationUnitOfWork, post: Post, context: PullContext
    ) -> None:
        metadata: dict[str, Any] = dict(post.metadata)
        if post.remote_id:
            metadata.setdefault(self._identifier_meta_key, post.remote_id)
        metadata = self._hooks.before_update_meta(metadata, post, context)

        record_id = _require_local_id(post)
        for key, value in metadata.items():
            try:
                written = uow.repositories.metadata.write(record_id, key, value)
            except StoreError as exc:
                raise MetadataWriteFailed(
                    f"Could not write meta {key!r} for record {record_id}: {exc}",
                    key=key,
                    remote_id=post.remote_id,
                    local_id=record_id,
                ) from exc
            if not written:
                raise MetadataWriteFailed(
                    f"Could not write meta {key!r} for record {record_id}",
                    key=key,
                    remote_id=post.remote_id,
                    local_id=record_id,
                )
            uow.commit()

    def _commit_terms(
        self, uow: SyndicationUnitOfWork, post: Post, context: PullContext
    ) -> None:
        assignments: dict[str, list[TermRef]] = {
            taxonomy: list(terms) for taxonomy, terms in post.taxonomy_assignments.items()
        }
        assignments = self._hooks.before_set_terms(assignments, post, context)

        record_id = _require_local_id(post)
        for taxonomy, terms in assignments.items():
            try:
                assigned = uow.repositories.terms.assign(record_id, taxonomy, terms)
            except StoreError as exc:
                raise TaxonomyWriteFailed(
                    f"Could not set {taxonomy!r} terms for record {record_id}: {exc}",
                    taxonomy=taxonomy,
                    remote_id=post.remote_id,
                    local_id=record_id,
                ) from exc
            if not assigned:
                raise TaxonomyWriteFailed(
                    f"Could not set {taxonomy!r} terms for record {record_id}",
                    taxonomy=taxonomy,
                    remote_id=post.remote_id,
                    local_id=record_id,
                )
            uow.commit()


def _require_local_id(post: Post) -> int:
    if post.local_id is None:
        raise PrimaryCommitFailed(
            f"Post {post.remote_id!r} has no local record after commit",
            remote_id=post.remote_id,
        )
    return post.local_id


def _materialize_batch(posts: object) -> list[Post]:
    if posts is None or isinstance(posts, (str, bytes, Mapping)) or not isinstance(posts, Iterable):
        raise InvalidBatchInput(
            f"posts must be an iterable of Post, got {type(posts).__name__}"
        )
    batch = list(posts)
    for index, item in enumerate(batch):
        if not isinstance(item, Post):
            raise InvalidBatchInput(
                f"posts[{index}] must be a Post, got {type(item).__name__}"
            )
    return batch
