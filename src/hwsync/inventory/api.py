"""Raw inventory API protocols.

These describe the transport the capability services sit on: list calls
take a filter mapping (see ``hwsync.inventory.requests``) and return a
``ListResponse``; writes take a writable model plus id. ``NetBoxHTTPClient``
implements all four; tests substitute mocks.
"""

from typing import Any, Protocol

from hwsync.inventory.models import (
    InventoryCluster,
    InventoryDevice,
    InventoryInterface,
    InventoryIPAddress,
    InventoryPlatform,
    InventoryPrefix,
    InventoryRegion,
    InventoryRole,
    InventorySite,
    InventoryTag,
    InventoryVlan,
    ListResponse,
    WritableDevice,
    WritableInterface,
)

Query = dict[str, Any]


class VirtualizationAPI(Protocol):
    def list_clusters(self, query: Query) -> ListResponse[InventoryCluster]: ...


class DCIMAPI(Protocol):
    def list_devices(self, query: Query) -> ListResponse[InventoryDevice]: ...

    def list_device_roles(self, query: Query) -> ListResponse[InventoryRole]: ...

    def list_interfaces(self, query: Query) -> ListResponse[InventoryInterface]: ...

    def list_platforms(self, query: Query) -> ListResponse[InventoryPlatform]: ...

    def get_site(self, site_id: int) -> InventorySite: ...

    def get_region(self, region_id: int) -> InventoryRegion: ...

    def update_device(self, device: WritableDevice, device_id: int) -> InventoryDevice: ...

    def update_interface(
        self, iface: WritableInterface, iface_id: int
    ) -> InventoryInterface: ...

    def delete_interface(self, iface_id: int) -> None: ...


class IPAMAPI(Protocol):
    def list_ip_addresses(self, query: Query) -> ListResponse[InventoryIPAddress]: ...

    def list_vlans(self, query: Query) -> ListResponse[InventoryVlan]: ...

    def list_prefixes(self, query: Query) -> ListResponse[InventoryPrefix]: ...

    def delete_ip_address(self, address_id: int) -> None: ...


class ExtrasAPI(Protocol):
    def list_tags(self, query: Query) -> ListResponse[InventoryTag]: ...
