"""NetBox facade grouping the capability services."""

from dataclasses import dataclass

from hwsync.core.settings import EnvSettings
from hwsync.inventory.client import NetBoxHTTPClient
from hwsync.inventory.dcim import DCIM, DCIMService
from hwsync.inventory.extras import Extras, ExtrasService
from hwsync.inventory.ipam import IPAM, IPAMService
from hwsync.inventory.virtualization import Virtualization, VirtualizationService


@dataclass
class NetBox:
    """One capability per inventory sub-resource.

    Each attribute can be swapped for a test double independently.
    """

    virtualization: Virtualization
    dcim: DCIM
    ipam: IPAM
    extras: Extras

    @classmethod
    def from_client(cls, client: NetBoxHTTPClient) -> "NetBox":
        return cls(
            virtualization=VirtualizationService(client),
            dcim=DCIMService(client),
            ipam=IPAMService(client),
            extras=ExtrasService(client),
        )

    @classmethod
    def from_settings(cls, settings: EnvSettings) -> "NetBox":
        return cls.from_client(NetBoxHTTPClient.from_settings(settings))
