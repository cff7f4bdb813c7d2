"""Inventory capability interfaces.

Narrow, error-normalized access to NetBox:

- VirtualizationService: cluster lookup
- DCIMService: devices, interfaces, roles, platforms
- IPAMService: IP addresses, VLANs, prefixes
- ExtrasService: tags

Usage:
    from hwsync.inventory import NetBox

    netbox = NetBox.from_settings(settings)
    cluster = netbox.virtualization.get_cluster_by_name_region_type("", "eu-de-1", "kvm")
"""

from hwsync.inventory.dcim import DCIM, DCIMService
from hwsync.inventory.extras import Extras, ExtrasService
from hwsync.inventory.ipam import IPAM, IPAMService
from hwsync.inventory.netbox import NetBox
from hwsync.inventory.virtualization import Virtualization, VirtualizationService

__all__ = [
    "DCIM",
    "DCIMService",
    "Extras",
    "ExtrasService",
    "IPAM",
    "IPAMService",
    "NetBox",
    "Virtualization",
    "VirtualizationService",
]
