"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from synpull.adapters.rss import TRANSPORT_TYPE as RSS_TRANSPORT_TYPE
from synpull.adapters.rss import RssPullClient
from synpull.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyndicationUnitOfWork,
    is_started,
    startup,
)
from synpull.config import TRANSPORT_TYPE_OPTION, PullConfig, get_pull_config
from synpull.domain.model import Site
from synpull.domain.ports.unit_of_work import SyndicationUnitOfWork
from synpull.domain.pulling import (
    PostReconciler,
    PullClientRegistry,
    PullOrchestrator,
    PullResult,
    StatusGate,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from synpull.domain.ports.hooks import PreCommitHooks

UnitOfWorkFactory = Callable[[], SyndicationUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _default_unit_of_work_factory(config: PullConfig) -> UnitOfWorkFactory:
    def factory() -> SyndicationUnitOfWork:
        return SqlAlchemySyndicationUnitOfWork(taxonomies=config.taxonomies)

    return factory


def build_client_registry(
    unit_of_work_factory: UnitOfWorkFactory,
    *,
    config: PullConfig | None = None,
) -> PullClientRegistry:
    """Register the pull clients shipped with synpull."""

    effective_config = config or get_pull_config()
    registry = PullClientRegistry()
    registry.register(
        RSS_TRANSPORT_TYPE,
        RssPullClient(
            unit_of_work_factory=unit_of_work_factory,
            timeout_seconds=effective_config.http_timeout_seconds,
        ),
    )
    return registry


def pull_site(
    site_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clients: PullClientRegistry | None = None,
    hooks: PreCommitHooks | None = None,
    config: PullConfig | None = None,
    fail_fast: bool | None = None,
) -> PullResult:
    """Pull and reconcile the posts of one site using the configured adapters."""

    effective_config = config or get_pull_config()
    if unit_of_work_factory is None:
        _ensure_started()
        unit_of_work_factory = _default_unit_of_work_factory(effective_config)
    effective_clients = clients or build_client_registry(
        unit_of_work_factory, config=effective_config
    )
    reconciler = PostReconciler(
        unit_of_work_factory,
        hooks=hooks,
        identifier_meta_key=effective_config.identifier_meta_key,
        fail_fast=effective_config.fail_fast if fail_fast is None else fail_fast,
    )
    orchestrator = PullOrchestrator(
        unit_of_work_factory,
        effective_clients,
        reconciler=reconciler,
        transport_type_option=effective_config.transport_type_option,
    )

    log.info("Starting pull for site %s", site_id)
    result = orchestrator.process_site(site_id)

    if result.ok:
        report = result.report
        log.info(
            "Finished pull for site %s: fetched=%s, created=%s, updated=%s, failed=%s",
            site_id,
            len(result.posts),
            len(report.created) if report else 0,
            len(report.updated) if report else 0,
            len(report.failures) if report else 0,
        )
    else:
        log.warning("Pull for site %s did not run: %s", site_id, result.failure)
    return result


def create_site(
    *,
    name: str,
    transport_type: str,
    options: Mapping[str, str] | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Persist a new site with its transport type and extra options."""

    if unit_of_work_factory is None:
        _ensure_started()
        unit_of_work_factory = _default_unit_of_work_factory(get_pull_config())

    with unit_of_work_factory() as uow:
        sites = uow.repositories.sites
        site_id = sites.add(Site(name=name))
        sites.set_option(site_id, TRANSPORT_TYPE_OPTION, transport_type)
        for key, value in (options or {}).items():
            sites.set_option(site_id, key, value)
        uow.commit()

    log.info("Created site %s (%s) using transport %s", site_id, name, transport_type)
    return site_id


def get_site_status(
    site_id: int, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> str | None:
    if unit_of_work_factory is None:
        _ensure_started()
        unit_of_work_factory = _default_unit_of_work_factory(get_pull_config())
    return StatusGate(unit_of_work_factory).get_status(site_id)


def reset_site_status(
    site_id: int, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> bool:
    """Force a site back to idle, e.g. after a crashed pull left it marked as pulling."""

    if unit_of_work_factory is None:
        _ensure_started()
        unit_of_work_factory = _default_unit_of_work_factory(get_pull_config())
    return StatusGate(unit_of_work_factory).release(site_id)
