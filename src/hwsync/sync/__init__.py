"""
NetBox Device Sync Module.

This module provides:
- resolve_drift: compute corrective actions for one device (no I/O)
- ClusterReconciler: walk clusters and devices, apply the actions
- StatusStore: latest outcome per update

Architecture:
    UpdateSpec -> ClusterReconciler -> NetBox capabilities -> drift -> writes

Usage:
    from hwsync.sync import ClusterReconciler, ReconcilerConfig

    reconciler = ClusterReconciler(netbox, ReconcilerConfig(expected_platform="Linux KVM"))
    outcome = reconciler.reconcile(spec.clusters)
"""

from hwsync.sync.drift import DeviceSnapshot, classify_interface, resolve_drift
from hwsync.sync.models import (
    ClusterDescriptor,
    ReconcileOutcome,
    ReconcileState,
    UpdateSpec,
)
from hwsync.sync.reconciler import ActionExecutor, ClusterReconciler, ReconcilerConfig
from hwsync.sync.status import StatusStore, UpdateStatus

__all__ = [
    "ActionExecutor",
    "ClusterDescriptor",
    "ClusterReconciler",
    "DeviceSnapshot",
    "ReconcileOutcome",
    "ReconcileState",
    "ReconcilerConfig",
    "StatusStore",
    "UpdateSpec",
    "UpdateStatus",
    "classify_interface",
    "resolve_drift",
]
