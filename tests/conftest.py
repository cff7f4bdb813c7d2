"""Pytest configuration and shared fixtures."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from hwsync.core.settings import EnvSettings
from hwsync.inventory.dcim import DCIMService
from hwsync.inventory.extras import ExtrasService
from hwsync.inventory.ipam import IPAMService
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
from hwsync.inventory.netbox import NetBox
from hwsync.inventory.virtualization import VirtualizationService


class FakeNetBoxAPI:
    """In-memory NetBox implementing every raw API protocol.

    Writes mutate the stored records, so consecutive passes observe the
    effect of earlier ones. Every call is appended to ``calls``.
    """

    def __init__(self) -> None:
        self.clusters: list[dict[str, Any]] = []
        self.devices: dict[int, InventoryDevice] = {}
        self.device_clusters: dict[int, int] = {}
        self.interfaces: dict[int, InventoryInterface] = {}
        self.addresses: dict[int, InventoryIPAddress] = {}
        self.platforms: list[InventoryPlatform] = []
        self.roles: list[InventoryRole] = []
        self.tags: list[InventoryTag] = []
        self.sites: dict[int, InventorySite] = {}
        self.regions: dict[int, InventoryRegion] = {}
        self.calls: list[tuple[str, Any]] = []
        self.failures: dict[str, Exception] = {}

    # -- seeding ---------------------------------------------------------

    def add_cluster(self, cluster_id: int, name: str, region: str = "", type: str = "") -> None:
        self.clusters.append({"id": cluster_id, "name": name, "region": region, "type": type})

    def add_device(self, cluster_id: int, **fields: Any) -> InventoryDevice:
        device = InventoryDevice(**fields)
        self.devices[device.id] = device
        self.device_clusters[device.id] = cluster_id
        return device

    def add_interface(self, **fields: Any) -> InventoryInterface:
        iface = InventoryInterface(**fields)
        self.interfaces[iface.id] = iface
        return iface

    def add_address(self, **fields: Any) -> InventoryIPAddress:
        ip = InventoryIPAddress(**fields)
        self.addresses[ip.id] = ip
        return ip

    def add_platform(self, platform_id: int, name: str) -> None:
        self.platforms.append(InventoryPlatform(id=platform_id, name=name))

    # -- plumbing --------------------------------------------------------

    def _record(self, method: str, arg: Any) -> None:
        self.calls.append((method, arg))
        if method in self.failures:
            raise self.failures[method]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    @staticmethod
    def _respond(items: list) -> ListResponse:
        return ListResponse(count=len(items), results=items)

    # -- virtualization --------------------------------------------------

    def list_clusters(self, query: dict[str, Any]) -> ListResponse[InventoryCluster]:
        self._record("list_clusters", query)
        matches = [
            InventoryCluster(id=c["id"], name=c["name"])
            for c in self.clusters
            if all(c.get(key) == value for key, value in query.items())
        ]
        return self._respond(matches)

    # -- dcim ------------------------------------------------------------

    def list_devices(self, query: dict[str, Any]) -> ListResponse[InventoryDevice]:
        self._record("list_devices", query)
        matches = []
        for device in self.devices.values():
            if "name" in query and device.name != query["name"]:
                continue
            if "id" in query and device.id != query["id"]:
                continue
            if "cluster_id" in query and self.device_clusters.get(device.id) != query["cluster_id"]:
                continue
            matches.append(device)
        return self._respond(matches)

    def list_device_roles(self, query: dict[str, Any]) -> ListResponse[InventoryRole]:
        self._record("list_device_roles", query)
        return self._respond([r for r in self.roles if r.name == query.get("name", r.name)])

    def list_interfaces(self, query: dict[str, Any]) -> ListResponse[InventoryInterface]:
        self._record("list_interfaces", query)
        matches = []
        for iface in sorted(self.interfaces.values(), key=lambda i: i.id):
            if "name" in query and iface.name != query["name"]:
                continue
            if "id" in query and iface.id != query["id"]:
                continue
            if "device_id" in query and iface.device_id != query["device_id"]:
                continue
            if "lag_id" in query and iface.lag_id != query["lag_id"]:
                continue
            matches.append(iface)
        return self._respond(matches)

    def list_platforms(self, query: dict[str, Any]) -> ListResponse[InventoryPlatform]:
        self._record("list_platforms", query)
        return self._respond([p for p in self.platforms if p.name == query.get("name", p.name)])

    def get_site(self, site_id: int) -> InventorySite:
        self._record("get_site", site_id)
        return self.sites[site_id]

    def get_region(self, region_id: int) -> InventoryRegion:
        self._record("get_region", region_id)
        return self.regions[region_id]

    def update_device(self, device: WritableDevice, device_id: int) -> InventoryDevice:
        self._record("update_device", (device, device_id))
        current = self.devices[device_id]
        updated = current.model_copy(
            update={"platform_id": device.platform or 0, "oob_ip_id": device.oob_ip or 0}
        )
        self.devices[device_id] = updated
        return updated

    def update_interface(self, iface: WritableInterface, iface_id: int) -> InventoryInterface:
        self._record("update_interface", (iface, iface_id))
        updated = self.interfaces[iface_id].model_copy(update={"name": iface.name})
        self.interfaces[iface_id] = updated
        return updated

    def delete_interface(self, iface_id: int) -> None:
        self._record("delete_interface", iface_id)
        del self.interfaces[iface_id]

    # -- ipam ------------------------------------------------------------

    def list_ip_addresses(self, query: dict[str, Any]) -> ListResponse[InventoryIPAddress]:
        self._record("list_ip_addresses", query)
        matches = []
        for ip in sorted(self.addresses.values(), key=lambda a: a.id):
            if "interface_id" in query and ip.assigned_interface_id != query["interface_id"]:
                continue
            if "address" in query and ip.address != query["address"]:
                continue
            matches.append(ip)
        return self._respond(matches)

    def list_vlans(self, query: dict[str, Any]) -> ListResponse[InventoryVlan]:
        self._record("list_vlans", query)
        return self._respond([])

    def list_prefixes(self, query: dict[str, Any]) -> ListResponse[InventoryPrefix]:
        self._record("list_prefixes", query)
        return self._respond([])

    def delete_ip_address(self, address_id: int) -> None:
        self._record("delete_ip_address", address_id)
        del self.addresses[address_id]

    # -- extras ----------------------------------------------------------

    def list_tags(self, query: dict[str, Any]) -> ListResponse[InventoryTag]:
        self._record("list_tags", query)
        return self._respond([t for t in self.tags if t.name == query.get("name", t.name)])


@pytest.fixture
def fake_api() -> FakeNetBoxAPI:
    """Empty in-memory NetBox."""
    return FakeNetBoxAPI()


@pytest.fixture
def netbox(fake_api: FakeNetBoxAPI) -> NetBox:
    """Real capability services on top of the in-memory NetBox."""
    return NetBox(
        virtualization=VirtualizationService(fake_api),
        dcim=DCIMService(fake_api),
        ipam=IPAMService(fake_api),
        extras=ExtrasService(fake_api),
    )


@pytest.fixture
def mock_netbox() -> NetBox:
    """NetBox facade whose capabilities are MagicMocks."""
    return NetBox(
        virtualization=MagicMock(spec=VirtualizationService),
        dcim=MagicMock(spec=DCIMService),
        ipam=MagicMock(spec=IPAMService),
        extras=MagicMock(spec=ExtrasService),
    )


@pytest.fixture
def test_settings() -> EnvSettings:
    """Test settings with safe defaults."""
    return EnvSettings(
        _env_file=None,
        netbox_url="https://netbox.example.com",
        netbox_token="test-token-123",
        expected_platform="Linux KVM",
        reconcile_interval=60.0,
    )
