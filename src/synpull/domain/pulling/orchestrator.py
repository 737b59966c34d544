"""Drive one full pull cycle for a site."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from synpull.config.pull import TRANSPORT_TYPE_OPTION
from synpull.domain.errors import PullFailure
from synpull.domain.model import Post
from synpull.domain.pulling.context import PullContext
from synpull.domain.pulling.status_gate import StatusGate

if TYPE_CHECKING:
    from collections.abc import Callable

    from synpull.domain.ports.unit_of_work import SyndicationUnitOfWork
    from synpull.domain.pulling.reconciler import PostReconciler, ReconcileReport
    from synpull.domain.pulling.registry import PullClientRegistry

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PullResult:
    """Outcome of ``PullOrchestrator.process_site``.

    Orchestrator-level failures are reported through ``failure``; ``posts`` is
    empty whenever ``failure`` is set.
    """

    site_id: int
    posts: tuple[Post, ...] = ()
    failure: PullFailure | None = None
    report: ReconcileReport | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def failed(cls, site_id: int, failure: PullFailure) -> PullResult:
        return cls(site_id=site_id, failure=failure)


class PullOrchestrator:
    """Gate, fetch, reconcile and release for a single site.

    Steps run in a fixed order: the status check, the transport lookup, the
    atomic transition to ``pulling``, the fetch, reconciliation of the fetched
    posts and finally the transition back to ``idle``. The last step runs on
    every exit path once the site has been marked as pulling.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], SyndicationUnitOfWork],
        clients: PullClientRegistry,
        *,
        reconciler: PostReconciler | None = None,
        gate: StatusGate | None = None,
        transport_type_option: str = TRANSPORT_TYPE_OPTION,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clients = clients
        self._reconciler = reconciler
        self._gate = gate or StatusGate(unit_of_work_factory)
        self._transport_type_option = transport_type_option

    @property
    def gate(self) -> StatusGate:
        return self._gate

    def process_site(self, site_id: int) -> PullResult:
        if not self._gate.is_idle(site_id):
            log.info("Site %s is not idle; skipping pull", site_id)
            return PullResult.failed(site_id, PullFailure.SITE_BUSY)

        transport_type = self._transport_type(site_id)
        if not transport_type:
            log.warning("Site %s has no transport type configured", site_id)
            return PullResult.failed(site_id, PullFailure.NO_TRANSPORT_CONFIGURED)

        client = self._clients.get(transport_type)
        if client is None:
            log.warning(
                "No pull client registered for transport %r (site %s)", transport_type, site_id
            )
            return PullResult.failed(site_id, PullFailure.UNKNOWN_TRANSPORT_TYPE)

        context = PullContext(site_id=site_id, transport_type=transport_type)

        if not self._gate.acquire(site_id):
            return PullResult.failed(site_id, PullFailure.SITE_BUSY)

        report: ReconcileReport | None = None
        try:
            log.info("Pulling site %s via %s", site_id, transport_type)
            posts = _as_posts(client.fetch(site_id, context))
            if posts and self._reconciler is not None:
                report = self._reconciler.process_posts(posts, context)
        finally:
            self._gate.release(site_id)

        if not posts:
            log.info("Site %s returned no posts", site_id)
            return PullResult.failed(site_id, PullFailure.EMPTY_FETCH_RESULT)

        log.info("Pulled %s posts from site %s", len(posts), site_id)
        return PullResult(site_id=site_id, posts=tuple(posts), report=report)

    def _transport_type(self, site_id: int) -> str | None:
        with self._uow_factory() as uow:
            value = uow.repositories.sites.get_option(site_id, self._transport_type_option)
        return value.strip() if value is not None else None


def _as_posts(fetched: object) -> list[Post]:
    if fetched is None or isinstance(fetched, (str, bytes, Mapping)):
        return []
    if not isinstance(fetched, Iterable):
        return []
    return [item for item in fetched if isinstance(item, Post)]
