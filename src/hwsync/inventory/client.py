"""NetBox HTTP transport.

Thin httpx adapter implementing the raw API protocols in
``hwsync.inventory.api``: list endpoints are queried with the filter
mapping as query parameters, writes are PATCH, deletes are DELETE.
Responses are mapped into the flat inventory models.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from hwsync.core.errors import UpstreamError
from hwsync.core.settings import EnvSettings
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

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NetBoxHTTPClient:
    """Synchronous NetBox REST client.

    Usage:
        with NetBoxHTTPClient("https://netbox.example.com", "token") as client:
            devices = client.list_devices({"cluster_id": 1})
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        page_limit: int = 1000,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.page_limit = page_limit
        self._client = httpx.Client(
            base_url=f"{self.base_url}/api/",
            headers={
                "Authorization": f"Token {token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            verify=verify_ssl,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: EnvSettings) -> "NetBoxHTTPClient":
        return cls(
            base_url=settings.netbox_url,
            token=settings.netbox_token,
            verify_ssl=settings.netbox_verify_ssl,
            timeout=settings.netbox_timeout,
            page_limit=settings.netbox_page_limit,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "NetBoxHTTPClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            raise UpstreamError(
                f"{method} {path} failed: HTTP {response.status_code} {response.reason_phrase}: {detail}"
            )

        logger.debug(f"{method} {path} -> {response.status_code}")
        return response

    def _list(
        self, path: str, query: dict[str, Any], parse: Callable[[dict[str, Any]], T]
    ) -> ListResponse[T]:
        params = {**query, "limit": self.page_limit}
        data = self._request("GET", path, params=params).json()
        results = [parse(item) for item in data.get("results", [])]
        return ListResponse(count=int(data.get("count", len(results))), results=results)

    def _get(self, path: str, parse: Callable[[dict[str, Any]], T]) -> T:
        return parse(self._request("GET", path).json())

    def _patch(self, path: str, body: dict[str, Any], parse: Callable[[dict[str, Any]], T]) -> T:
        return parse(self._request("PATCH", path, json=body).json())

    def _delete(self, path: str) -> None:
        self._request("DELETE", path)

    # ------------------------------------------------------------------
    # Virtualization
    # ------------------------------------------------------------------

    def list_clusters(self, query: dict[str, Any]) -> ListResponse[InventoryCluster]:
        return self._list("virtualization/clusters/", query, InventoryCluster.from_api)

    # ------------------------------------------------------------------
    # DCIM
    # ------------------------------------------------------------------

    def list_devices(self, query: dict[str, Any]) -> ListResponse[InventoryDevice]:
        return self._list("dcim/devices/", query, InventoryDevice.from_api)

    def list_device_roles(self, query: dict[str, Any]) -> ListResponse[InventoryRole]:
        return self._list("dcim/device-roles/", query, InventoryRole.from_api)

    def list_interfaces(self, query: dict[str, Any]) -> ListResponse[InventoryInterface]:
        return self._list("dcim/interfaces/", query, InventoryInterface.from_api)

    def list_platforms(self, query: dict[str, Any]) -> ListResponse[InventoryPlatform]:
        return self._list("dcim/platforms/", query, InventoryPlatform.from_api)

    def get_site(self, site_id: int) -> InventorySite:
        return self._get(f"dcim/sites/{site_id}/", InventorySite.from_api)

    def get_region(self, region_id: int) -> InventoryRegion:
        return self._get(f"dcim/regions/{region_id}/", InventoryRegion.from_api)

    def update_device(self, device: WritableDevice, device_id: int) -> InventoryDevice:
        return self._patch(
            f"dcim/devices/{device_id}/",
            device.model_dump(exclude_none=True),
            InventoryDevice.from_api,
        )

    def update_interface(self, iface: WritableInterface, iface_id: int) -> InventoryInterface:
        return self._patch(
            f"dcim/interfaces/{iface_id}/",
            iface.model_dump(exclude_none=True),
            InventoryInterface.from_api,
        )

    def delete_interface(self, iface_id: int) -> None:
        self._delete(f"dcim/interfaces/{iface_id}/")

    # ------------------------------------------------------------------
    # IPAM
    # ------------------------------------------------------------------

    def list_ip_addresses(self, query: dict[str, Any]) -> ListResponse[InventoryIPAddress]:
        return self._list("ipam/ip-addresses/", query, InventoryIPAddress.from_api)

    def list_vlans(self, query: dict[str, Any]) -> ListResponse[InventoryVlan]:
        return self._list("ipam/vlans/", query, InventoryVlan.from_api)

    def list_prefixes(self, query: dict[str, Any]) -> ListResponse[InventoryPrefix]:
        return self._list("ipam/prefixes/", query, InventoryPrefix.from_api)

    def delete_ip_address(self, address_id: int) -> None:
        self._delete(f"ipam/ip-addresses/{address_id}/")

    # ------------------------------------------------------------------
    # Extras
    # ------------------------------------------------------------------

    def list_tags(self, query: dict[str, Any]) -> ListResponse[InventoryTag]:
        return self._list("extras/tags/", query, InventoryTag.from_api)
