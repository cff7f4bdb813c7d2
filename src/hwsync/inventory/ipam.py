"""IP address, VLAN and prefix directory."""

from typing import Protocol

from hwsync.core.errors import NotFoundCountError, RelationEmptyError
from hwsync.inventory.api import IPAMAPI
from hwsync.inventory.base import call_upstream, exactly_one
from hwsync.inventory.models import InventoryIPAddress, InventoryPrefix, InventoryVlan
from hwsync.inventory.requests import (
    ListIPAddressesRequest,
    ListPrefixesRequest,
    ListVlansRequest,
)


class IPAM(Protocol):
    def get_vlan_by_name(self, name: str) -> InventoryVlan: ...

    def get_ip_address_by_address(self, address: str) -> InventoryIPAddress: ...

    def get_ip_addresses_for_interface(self, iface_id: int) -> list[InventoryIPAddress]: ...

    def get_ip_address_for_interface(self, iface_id: int) -> InventoryIPAddress: ...

    def get_prefixes_containing(self, contains: str) -> list[InventoryPrefix]: ...

    def delete_ip_address(self, address_id: int) -> None: ...


class IPAMService:
    def __init__(self, api: IPAMAPI) -> None:
        self.api = api

    def get_vlan_by_name(self, name: str) -> InventoryVlan:
        query = ListVlansRequest(name=name).build()
        res = call_upstream(f"unable to list VLANs by name {name}", self.api.list_vlans, query)
        return exactly_one(res, f"unexpected number of VLANs found by name {name}")

    def get_ip_address_by_address(self, address: str) -> InventoryIPAddress:
        query = ListIPAddressesRequest(address=address).build()
        res = call_upstream(
            f"unable to list IP addresses with address {address}", self.api.list_ip_addresses, query
        )
        if len(res.results) != 1:
            raise NotFoundCountError(
                f"unexpected number of IP addresses found with address {address}: {len(res.results)}",
                count=len(res.results),
            )
        return res.results[0]

    def get_ip_addresses_for_interface(self, iface_id: int) -> list[InventoryIPAddress]:
        query = ListIPAddressesRequest(interface_id=iface_id).build()
        res = call_upstream(
            f"unable to list IP addresses for interface ID {iface_id}", self.api.list_ip_addresses, query
        )
        return list(res.results)

    def get_ip_address_for_interface(self, iface_id: int) -> InventoryIPAddress:
        """Return the single address bound to an interface."""
        addresses = self.get_ip_addresses_for_interface(iface_id)
        if len(addresses) != 1:
            raise RelationEmptyError(
                f"unexpected number of IP addresses found for interface ID {iface_id}: {len(addresses)}",
                count=len(addresses),
            )
        return addresses[0]

    def get_prefixes_containing(self, contains: str) -> list[InventoryPrefix]:
        query = ListPrefixesRequest(contains=contains).build()
        res = call_upstream(f"unable to list prefixes containing {contains}", self.api.list_prefixes, query)
        if not res.results:
            raise RelationEmptyError(f"prefixes containing {contains} not found")
        return list(res.results)

    def delete_ip_address(self, address_id: int) -> None:
        call_upstream(
            f"unable to delete IP address ({address_id})", self.api.delete_ip_address, address_id
        )
