"""Durable per-site status guarding against overlapping pulls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from synpull.domain.model import SiteStatus, slugify

if TYPE_CHECKING:
    from collections.abc import Callable

    from synpull.domain.ports.unit_of_work import SyndicationUnitOfWork

log = logging.getLogger(__name__)

# An unset status counts as idle for starting a pull.
IDLE_STATES: Final[frozenset[str]] = frozenset({"", SiteStatus.IDLE.value})


def normalize_status(value: object) -> str:
    return slugify(value)


class StatusGate:
    """Read and transition the stored status of a site.

    Every call runs in its own unit of work and commits immediately so other
    processes observe the transition right away.
    """

    def __init__(self, unit_of_work_factory: Callable[[], SyndicationUnitOfWork]) -> None:
        self._uow_factory = unit_of_work_factory

    def get_status(self, site_id: int | None) -> str | None:
        """Return the raw stored status, ``""`` when unset, ``None`` for unknown sites."""

        if not site_id:
            return None
        with self._uow_factory() as uow:
            return uow.repositories.sites.get_status(int(site_id))

    def set_status(self, site_id: int | None, new_status: object) -> bool:
        status = normalize_status(new_status)
        if not site_id or not status:
            return False
        with self._uow_factory() as uow:
            updated = uow.repositories.sites.set_status(int(site_id), status)
            if updated:
                uow.commit()
        log.debug("Site %s status set to %r: %s", site_id, status, updated)
        return updated

    def is_idle(self, site_id: int | None) -> bool:
        return self.get_status(site_id) in IDLE_STATES

    def acquire(self, site_id: int | None, status: SiteStatus = SiteStatus.PULLING) -> bool:
        """Atomically move an idle site into ``status``; ``False`` if it was not idle."""

        if not site_id:
            return False
        with self._uow_factory() as uow:
            acquired = uow.repositories.sites.compare_and_set_status(
                int(site_id), IDLE_STATES, normalize_status(status)
            )
            if acquired:
                uow.commit()
        if not acquired:
            log.info("Site %s is busy; could not mark it %s", site_id, status)
        return acquired

    def release(self, site_id: int | None) -> bool:
        return self.set_status(site_id, SiteStatus.IDLE)
