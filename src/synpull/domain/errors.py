"""Error taxonomy for pulls and reconciliation."""

from __future__ import annotations

from enum import StrEnum


class SynpullError(Exception):
    """Base class for errors raised by synpull."""


class PullFailure(StrEnum):
    """Orchestrator-level outcomes reported as values, never raised."""

    SITE_BUSY = "site_busy"
    NO_TRANSPORT_CONFIGURED = "no_transport_configured"
    UNKNOWN_TRANSPORT_TYPE = "unknown_transport_type"
    EMPTY_FETCH_RESULT = "empty_fetch_result"


class StoreError(SynpullError):
    """Raised by local store adapters when a write is rejected."""


class ContentStoreError(StoreError):
    """The content store refused to insert or update a primary record."""


class TaxonomyStoreError(StoreError):
    """The taxonomy store refused a term assignment."""


class PullClientError(SynpullError):
    """A transport client could not fetch posts for a site."""


class InvalidBatchInput(SynpullError, TypeError):
    """Raised when a batch of posts is not an iterable of ``Post`` values."""


class ReconcileError(SynpullError):
    """Base class for failures while reconciling one post."""

    def __init__(
        self,
        message: str,
        *,
        remote_id: str | None = None,
        local_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.remote_id = remote_id
        self.local_id = local_id


class MissingLocalRecord(ReconcileError):
    """The post references a local record that does not exist."""


class PrimaryCommitFailed(ReconcileError):
    """Writing the primary fields of a post failed."""


class MetadataWriteFailed(ReconcileError):
    """Writing one metadata pair failed; earlier pairs stay committed."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        remote_id: str | None = None,
        local_id: int | None = None,
    ) -> None:
        super().__init__(message, remote_id=remote_id, local_id=local_id)
        self.key = key


class TaxonomyWriteFailed(ReconcileError):
    """Replacing the terms of one taxonomy failed."""

    def __init__(
        self,
        message: str,
        *,
        taxonomy: str,
        remote_id: str | None = None,
        local_id: int | None = None,
    ) -> None:
        super().__init__(message, remote_id=remote_id, local_id=local_id)
        self.taxonomy = taxonomy
