"""
Cluster Reconciler - brings NetBox device records in line with policy.

For each cluster descriptor:
    resolve cluster -> list devices -> per active device:
        gather interfaces + bound addresses -> resolve drift -> apply actions

Every step runs sequentially. The first failure stops the pass and is
reported as one chained error; changes already applied stay applied and are
listed in the outcome.
"""

import functools
import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from hwsync.core.errors import HwsyncError, ReconcileError
from hwsync.core.settings import EnvSettings
from hwsync.inventory.models import InventoryDevice, InventoryPlatform, WritableInterface
from hwsync.inventory.netbox import NetBox
from hwsync.sync.drift import (
    LEGACY_OOB_NAMES,
    DeviceSnapshot,
    interfaces_needing_addresses,
    resolve_drift,
)
from hwsync.sync.models import (
    Action,
    ClusterDescriptor,
    DeleteAddress,
    DeleteInterface,
    ReconcileOutcome,
    RenameInterface,
    UpdateDevice,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcilerConfig:
    """Policy the reconciler enforces; built once at startup."""

    expected_platform: str = "Linux KVM"
    dry_run: bool = False
    legacy_names: tuple[str, ...] = LEGACY_OOB_NAMES

    @classmethod
    def from_settings(cls, settings: EnvSettings) -> "ReconcilerConfig":
        return cls(expected_platform=settings.expected_platform, dry_run=settings.dry_run)


class ActionExecutor:
    """Maps corrective actions onto inventory write calls."""

    def __init__(self, netbox: NetBox) -> None:
        self.netbox = netbox

    def apply(self, action: Action, device: InventoryDevice) -> None:
        if isinstance(action, RenameInterface):
            iface = WritableInterface(
                name=action.new_name,
                device=action.device_id,
                type=action.interface_type or None,
            )
            self.netbox.dcim.update_interface(iface, action.interface_id)
        elif isinstance(action, UpdateDevice):
            writable = device.writable().model_copy(
                update={"platform": action.platform_id, "oob_ip": action.oob_ip_id}
            )
            self.netbox.dcim.update_device(writable, action.device_id)
        elif isinstance(action, DeleteAddress):
            self.netbox.ipam.delete_ip_address(action.address_id)
        elif isinstance(action, DeleteInterface):
            self.netbox.dcim.delete_interface(action.interface_id)
        else:
            raise TypeError(f"unsupported action: {action!r}")


class ClusterReconciler:
    """
    Reconciles the devices of inventory clusters.

    Usage:
        reconciler = ClusterReconciler(netbox, ReconcilerConfig.from_settings(settings))
        outcome = reconciler.reconcile(update.clusters)
    """

    def __init__(
        self,
        netbox: NetBox,
        config: ReconcilerConfig | None = None,
        executor: ActionExecutor | None = None,
    ) -> None:
        self.netbox = netbox
        self.config = config or ReconcilerConfig()
        self.executor = executor or ActionExecutor(netbox)
        self.stats: dict[str, int] = {}
        # Workers may share one reconciler across threads
        self._stats_lock = threading.Lock()
        self.reset_stats()

    def reconcile(self, clusters: Sequence[ClusterDescriptor]) -> ReconcileOutcome:
        """Reconcile descriptors in order, stopping at the first failing one."""
        applied: list[Action] = []
        for descriptor in clusters:
            try:
                applied.extend(self.reconcile_cluster(descriptor))
            except ReconcileError as e:
                applied.extend(e.applied)
                logger.error(f"reconcile stopped at cluster {descriptor}: {e}")
                return ReconcileOutcome.failure(str(e), applied)
        return ReconcileOutcome.success(applied)

    def reconcile_cluster(self, descriptor: ClusterDescriptor) -> list[Action]:
        """Reconcile every device of one cluster.

        Returns:
            Actions applied (or planned, in dry-run mode)

        Raises:
            ReconcileError: first failure, with cluster and device context;
                ``applied`` lists what was written before it
        """
        try:
            cluster = self.netbox.virtualization.get_cluster_by_name_region_type(
                descriptor.name, descriptor.region, descriptor.type
            )
        except HwsyncError as e:
            logger.error(
                f"unable to find cluster (name={descriptor.name!r}, region={descriptor.region!r}, "
                f"type={descriptor.type!r}): {e}"
            )
            raise ReconcileError(f"unable to reconcile cluster: {e}") from e

        try:
            devices = self.netbox.dcim.get_devices_by_cluster_id(cluster.id)
        except HwsyncError as e:
            logger.error(f"unable to find devices for cluster {cluster.name} ({cluster.id}): {e}")
            raise ReconcileError(
                f"unable to reconcile devices on cluster {cluster.name} ({cluster.id}): {e}"
            ) from e

        logger.info(f"reconciling cluster {cluster.name} ({cluster.id}): {len(devices)} devices")

        platform = self.platform_lookup()
        applied: list[Action] = []
        for device in devices:
            try:
                applied.extend(self.reconcile_device(device, platform))
            except HwsyncError as e:
                if isinstance(e, ReconcileError):
                    applied.extend(e.applied)
                self._count("errors")
                raise ReconcileError(
                    f"unable to reconcile device {device.name} ({device.id}) "
                    f"on cluster {cluster.name} ({cluster.id}): {e}",
                    applied,
                ) from e
        return applied

    def platform_lookup(self) -> Callable[[], InventoryPlatform]:
        """Expected platform, fetched on first use and then reused."""
        return functools.cache(
            lambda: self.netbox.dcim.get_platform_by_name(self.config.expected_platform)
        )

    def reconcile_device(
        self,
        device: InventoryDevice,
        platform: Callable[[], InventoryPlatform] | None = None,
    ) -> list[Action]:
        """Resolve and apply the corrective actions for one device.

        The platform is only looked up once the OOB interface and address
        have been resolved.

        Raises:
            ReconcileError: an action failed; ``applied`` lists the earlier ones
        """
        if not device.is_active:
            logger.info(f"device {device.name} ({device.id}) is {device.status or 'unknown'}, skipping")
            self._count("devices_skipped")
            return []

        snapshot = self.collect_snapshot(device)
        actions = resolve_drift(snapshot, platform or self.platform_lookup())

        if not actions:
            logger.info(f"device {device.name} ({device.id}) already has correct data")

        applied: list[Action] = []
        for action in actions:
            try:
                self._apply(action, device)
            except HwsyncError as e:
                raise ReconcileError(f"unable to {action.describe()}: {e}", applied) from e
            applied.append(action)

        self._count("devices_reconciled")
        return applied

    def collect_snapshot(self, device: InventoryDevice) -> DeviceSnapshot:
        """Read the device's interfaces and the addresses the resolver inspects."""
        interfaces = self.netbox.dcim.get_interfaces_for_device(device)
        snapshot = DeviceSnapshot(
            device=device,
            interfaces=interfaces,
            legacy_names=self.config.legacy_names,
        )
        for iface in interfaces_needing_addresses(snapshot):
            snapshot.addresses[iface.id] = self.netbox.ipam.get_ip_addresses_for_interface(iface.id)
        return snapshot

    def _apply(self, action: Action, device: InventoryDevice) -> None:
        if self.config.dry_run:
            logger.info(f"[DRY RUN] would {action.describe()} on device {device.name}")
            return

        self.executor.apply(action, device)
        self._count(action.kind)
        logger.info(f"{action.describe()} on device {device.name} ({device.id})")

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self.stats[key] += 1

    def get_stats(self) -> dict[str, int]:
        """Get reconciliation statistics."""
        with self._stats_lock:
            return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        with self._stats_lock:
            self.stats = {
                "devices_reconciled": 0,
                "devices_skipped": 0,
                "rename_interface": 0,
                "update_device": 0,
                "delete_address": 0,
                "delete_interface": 0,
                "errors": 0,
            }
