"""Map remote identifiers to local record ids."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from synpull.config.pull import IDENTIFIER_META_KEY
from synpull.domain.errors import StoreError

if TYPE_CHECKING:
    from synpull.domain.ports.persistence import ContentRepository

log = logging.getLogger(__name__)


class IdentityResolver:
    """Find the local record previously created for a remote post.

    Lookup goes through the syndication identifier stored in each record's
    metadata under ``meta_key``. Absence is a normal outcome.
    """

    def __init__(
        self, records: ContentRepository, *, meta_key: str = IDENTIFIER_META_KEY
    ) -> None:
        self._records = records
        self._meta_key = meta_key

    def resolve_local_id(self, remote_id: object) -> int | None:
        identifier = "" if remote_id is None else str(remote_id)
        if not identifier:
            return None
        try:
            local_id = self._records.find_by_identifier(identifier, meta_key=self._meta_key)
        except StoreError:
            log.warning("Identifier lookup failed for %r", identifier, exc_info=True)
            return None
        if local_id is None:
            return None
        return int(local_id)
