"""Pull cycle: status gate, identity resolution, reconciliation and orchestration."""

from __future__ import annotations

from .context import PullContext
from .identity import IdentityResolver
from .orchestrator import PullOrchestrator, PullResult
from .reconciler import ItemFailure, PostReconciler, ReconcileReport
from .registry import PullClientRegistry
from .status_gate import IDLE_STATES, StatusGate, normalize_status

__all__ = [
    "IDLE_STATES",
    "IdentityResolver",
    "ItemFailure",
    "PostReconciler",
    "PullClientRegistry",
    "PullContext",
    "PullOrchestrator",
    "PullResult",
    "ReconcileReport",
    "StatusGate",
    "normalize_status",
]
