"""Device, interface, role and platform directory."""

from typing import Protocol

from hwsync.core.errors import NotFoundCountError
from hwsync.inventory.api import DCIMAPI
from hwsync.inventory.base import call_upstream, exactly_one
from hwsync.inventory.models import (
    InventoryDevice,
    InventoryInterface,
    InventoryPlatform,
    InventoryRole,
    WritableDevice,
    WritableInterface,
)
from hwsync.inventory.requests import (
    ListDeviceRolesRequest,
    ListDevicesRequest,
    ListInterfacesRequest,
    ListPlatformsRequest,
)


class DCIM(Protocol):
    def get_device_by_name(self, name: str) -> InventoryDevice: ...

    def get_device_by_id(self, device_id: int) -> InventoryDevice: ...

    def get_devices_by_cluster_id(self, cluster_id: int) -> list[InventoryDevice]: ...

    def get_role_by_name(self, name: str) -> InventoryRole: ...

    def get_region_for_device(self, device: InventoryDevice) -> str: ...

    def get_interface_by_id(self, iface_id: int) -> InventoryInterface: ...

    def get_interfaces_for_device(self, device: InventoryDevice) -> list[InventoryInterface]: ...

    def get_interface_for_device(
        self, device: InventoryDevice, name: str
    ) -> InventoryInterface: ...

    def get_interfaces_by_lag_id(self, lag_id: int) -> list[InventoryInterface]: ...

    def get_platform_by_name(self, name: str) -> InventoryPlatform: ...

    def update_device(self, device: WritableDevice, device_id: int) -> InventoryDevice: ...

    def update_interface(
        self, iface: WritableInterface, iface_id: int
    ) -> InventoryInterface: ...

    def delete_interface(self, iface_id: int) -> None: ...


class DCIMService:
    """DCIM capability backed by a raw DCIM API.

    Identity lookups (by name or id) must match exactly one record.
    Relational listings return a possibly empty list.
    """

    def __init__(self, api: DCIMAPI) -> None:
        self.api = api

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    def get_device_by_name(self, name: str) -> InventoryDevice:
        query = ListDevicesRequest(name=name).build()
        res = call_upstream(f"unable to list devices by name {name}", self.api.list_devices, query)
        return exactly_one(res, f"unexpected number of devices found by name {name}")

    def get_device_by_id(self, device_id: int) -> InventoryDevice:
        query = ListDevicesRequest(id=device_id).build()
        res = call_upstream(f"unable to list devices for ID {device_id}", self.api.list_devices, query)
        return exactly_one(res, f"unexpected number of devices found for ID {device_id}")

    def get_devices_by_cluster_id(self, cluster_id: int) -> list[InventoryDevice]:
        query = ListDevicesRequest(cluster_id=cluster_id).build()
        res = call_upstream(
            f"unable to list devices by cluster ID {cluster_id}", self.api.list_devices, query
        )
        return list(res.results)

    def get_role_by_name(self, name: str) -> InventoryRole:
        query = ListDeviceRolesRequest(name=name).build()
        res = call_upstream(f"unable to list roles by name {name}", self.api.list_device_roles, query)
        return exactly_one(res, f"unexpected number of roles found by name {name}")

    def get_region_for_device(self, device: InventoryDevice) -> str:
        """Return the region slug of the device's site."""
        site = call_upstream(f"unable to get site for ID {device.site_id}", self.api.get_site, device.site_id)
        region = call_upstream(
            f"unable to get region for ID {site.region_id}", self.api.get_region, site.region_id
        )
        return region.slug

    # ------------------------------------------------------------------
    # Interfaces
    # ------------------------------------------------------------------

    def get_interface_by_id(self, iface_id: int) -> InventoryInterface:
        query = ListInterfacesRequest(id=iface_id).build()
        res = call_upstream(f"unable to list interface for ID {iface_id}", self.api.list_interfaces, query)
        if not res.results:
            raise NotFoundCountError(f"interface with ID {iface_id} not found")
        return exactly_one(res, f"unexpected number of interfaces found for ID {iface_id}")

    def get_interfaces_for_device(self, device: InventoryDevice) -> list[InventoryInterface]:
        query = ListInterfacesRequest(device_id=device.id).build()
        res = call_upstream(
            f"unable to list interfaces for device {device.name}", self.api.list_interfaces, query
        )
        return list(res.results)

    def get_interface_for_device(self, device: InventoryDevice, name: str) -> InventoryInterface:
        query = ListInterfacesRequest(name=name, device_id=device.id).build()
        res = call_upstream(
            f"unable to list interfaces by name {name} (device ID: {device.id})",
            self.api.list_interfaces,
            query,
        )
        if not res.results:
            raise NotFoundCountError(f"{name} interface not found")
        return exactly_one(res, f"unexpected number of {name} interfaces found (device ID: {device.id})")

    def get_interfaces_by_lag_id(self, lag_id: int) -> list[InventoryInterface]:
        query = ListInterfacesRequest(lag_id=lag_id).build()
        res = call_upstream(f"unable to list interfaces for LAG ID {lag_id}", self.api.list_interfaces, query)
        return list(res.results)

    # ------------------------------------------------------------------
    # Platforms
    # ------------------------------------------------------------------

    def get_platform_by_name(self, name: str) -> InventoryPlatform:
        query = ListPlatformsRequest(name=name).build()
        res = call_upstream(f"unable to list platforms by name {name}", self.api.list_platforms, query)
        return exactly_one(res, f"unexpected number of platforms found by name {name}")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update_device(self, device: WritableDevice, device_id: int) -> InventoryDevice:
        return call_upstream(
            f"unable to update device ({device_id})", self.api.update_device, device, device_id
        )

    def update_interface(self, iface: WritableInterface, iface_id: int) -> InventoryInterface:
        return call_upstream(
            f"unable to update interface ({iface_id})", self.api.update_interface, iface, iface_id
        )

    def delete_interface(self, iface_id: int) -> None:
        call_upstream(f"unable to delete interface ({iface_id})", self.api.delete_interface, iface_id)
