"""Drift resolution for a single device.

Pure decision logic: given a snapshot of a device, its interfaces and the
addresses bound to them, plus a lookup for the expected platform, compute the
ordered list of corrective actions. No inventory calls happen here; the
reconciler gathers the snapshot and executes the actions.

Order of actions:
1. rename a legacy OOB interface (iDRAC, iLO, ...) to ``remoteboard``
2. update platform / OOB IP on the device when either differs
3. delete every vmk interface, its addresses first
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from hwsync.core.errors import DriftError, NotFoundCountError, RelationEmptyError
from hwsync.inventory.models import (
    InventoryDevice,
    InventoryInterface,
    InventoryIPAddress,
    InventoryPlatform,
)
from hwsync.sync.models import (
    Action,
    DeleteAddress,
    DeleteInterface,
    RenameInterface,
    UpdateDevice,
)

logger = logging.getLogger(__name__)

OOB_INTERFACE_NAME = "remoteboard"

# Vendor names of the remote management interface
LEGACY_OOB_NAMES = (
    "iLO",  # HPE
    "iDRAC",  # Dell
    "imm",  # Lenovo
    "XClarity",  # Lenovo
    "cimc",  # Cisco
)

VMK_PREFIX = "vmk"


class InterfaceRole(str, Enum):
    LEGACY_OOB = "legacy_oob"
    OOB = "oob"
    VMK = "vmk"
    OTHER = "other"


def classify_interface(name: str, legacy_names: tuple[str, ...] = LEGACY_OOB_NAMES) -> InterfaceRole:
    """Determine an interface's role from its name."""
    if name == OOB_INTERFACE_NAME:
        return InterfaceRole.OOB
    if name in legacy_names:
        return InterfaceRole.LEGACY_OOB
    if name.startswith(VMK_PREFIX):
        return InterfaceRole.VMK
    return InterfaceRole.OTHER


@dataclass
class DeviceSnapshot:
    """Everything the resolver needs to know about one device."""

    device: InventoryDevice
    interfaces: list[InventoryInterface] = field(default_factory=list)
    # Bound addresses keyed by interface id; only OOB and vmk interfaces are looked up
    addresses: dict[int, list[InventoryIPAddress]] = field(default_factory=dict)
    legacy_names: tuple[str, ...] = LEGACY_OOB_NAMES

    def by_role(self, role: InterfaceRole) -> list[InventoryInterface]:
        return [i for i in self.interfaces if classify_interface(i.name, self.legacy_names) == role]

    def addresses_for(self, iface: InventoryInterface) -> list[InventoryIPAddress]:
        return self.addresses.get(iface.id, [])


def interfaces_needing_addresses(snapshot: DeviceSnapshot) -> list[InventoryInterface]:
    """Interfaces whose bound addresses the resolver will inspect."""
    wanted = (InterfaceRole.LEGACY_OOB, InterfaceRole.OOB, InterfaceRole.VMK)
    return [
        i for i in snapshot.interfaces if classify_interface(i.name, snapshot.legacy_names) in wanted
    ]


def resolve_oob_interface(snapshot: DeviceSnapshot) -> tuple[InventoryInterface, RenameInterface | None]:
    """Find the device's OOB interface and the rename it needs, if any.

    Raises:
        DriftError: legacy and canonical names coexist, or several legacy
            interfaces are present
        NotFoundCountError: no OOB interface, or more than one remoteboard
    """
    device = snapshot.device
    legacy = snapshot.by_role(InterfaceRole.LEGACY_OOB)
    canonical = snapshot.by_role(InterfaceRole.OOB)

    if legacy and canonical:
        names = ", ".join(i.name for i in legacy)
        raise DriftError(
            f"device {device.name} has both {names} and {OOB_INTERFACE_NAME} interfaces"
        )
    if len(legacy) > 1:
        names = ", ".join(i.name for i in legacy)
        raise DriftError(f"device {device.name} has more than one legacy OOB interface: {names}")

    if legacy:
        iface = legacy[0]
        rename = RenameInterface(
            device_id=device.id,
            interface_id=iface.id,
            old_name=iface.name,
            new_name=OOB_INTERFACE_NAME,
            interface_type=iface.type,
        )
        return iface, rename

    if not canonical:
        raise NotFoundCountError(f"{OOB_INTERFACE_NAME} interface not found", count=0)
    if len(canonical) > 1:
        raise NotFoundCountError(
            f"unexpected number of {OOB_INTERFACE_NAME} interfaces found: {len(canonical)}",
            count=len(canonical),
        )
    return canonical[0], None


def resolve_oob_address(snapshot: DeviceSnapshot, iface: InventoryInterface) -> InventoryIPAddress:
    """Return the single IP bound to the OOB interface."""
    addresses = snapshot.addresses_for(iface)
    if len(addresses) != 1:
        raise RelationEmptyError(
            f"unexpected number of IP addresses found for interface ID {iface.id}: {len(addresses)}",
            count=len(addresses),
        )
    return addresses[0]


def cleanup_actions(snapshot: DeviceSnapshot) -> list[Action]:
    """Delete actions for every vmk interface, addresses before the interface."""
    actions: list[Action] = []
    for iface in snapshot.by_role(InterfaceRole.VMK):
        for ip in snapshot.addresses_for(iface):
            actions.append(
                DeleteAddress(address_id=ip.id, address=ip.address, interface_name=iface.name)
            )
        actions.append(DeleteInterface(interface_id=iface.id, name=iface.name))
    return actions


def resolve_drift(
    snapshot: DeviceSnapshot, platform: Callable[[], InventoryPlatform]
) -> list[Action]:
    """Compute the corrective actions for one device.

    Args:
        snapshot: Device with its interfaces and their bound addresses
        platform: Returns the platform record the device is expected to
            carry; called only once the OOB interface and address resolve

    Returns:
        Ordered actions; empty when the device is already in line

    Raises:
        DriftError / NotFoundCountError: the device cannot be reconciled
    """
    device = snapshot.device
    actions: list[Action] = []

    oob_iface, rename = resolve_oob_interface(snapshot)
    if rename is not None:
        actions.append(rename)

    ip = resolve_oob_address(snapshot, oob_iface)
    expected = platform()

    if device.platform_id != expected.id or device.oob_ip_id != ip.id:
        actions.append(UpdateDevice(device_id=device.id, platform_id=expected.id, oob_ip_id=ip.id))
    else:
        logger.debug(f"device {device.name} ({device.id}) already has correct data")

    actions.extend(cleanup_actions(snapshot))
    return actions
