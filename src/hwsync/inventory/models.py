"""Inventory record models.

Records are flat: nested NetBox references (``{"id": 3, "name": ...}``) are
reduced to their id. ``from_api`` builds a record from a NetBox JSON object.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

STATUS_ACTIVE = "active"


def nested_id(value: Any) -> int:
    """Return the id of a nested reference, 0 when unset."""
    if value is None:
        return 0
    if isinstance(value, dict):
        return int(value.get("id") or 0)
    return int(value)


def choice_value(value: Any) -> str:
    """Return the value of a NetBox choice field (``{"value": ..., "label": ...}``)."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("value") or "")
    return str(value)


class InventoryRecord(BaseModel):
    """Base for all records: immutable, identified by id."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Inventory primary key")


class InventoryCluster(InventoryRecord):
    name: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryCluster":
        return cls(id=data["id"], name=data.get("name") or "")


class InventoryDevice(InventoryRecord):
    """Physical device as recorded in DCIM."""

    name: str = ""
    status: str = Field(default="", description="Status value, e.g. active / offline")
    platform_id: int = 0
    oob_ip_id: int = 0
    site_id: int = 0
    role_id: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def writable(self) -> "WritableDevice":
        """Writable representation carrying the current values."""
        return WritableDevice(
            name=self.name,
            status=self.status or None,
            platform=self.platform_id or None,
            oob_ip=self.oob_ip_id or None,
            site=self.site_id or None,
            role=self.role_id or None,
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryDevice":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            status=choice_value(data.get("status")),
            platform_id=nested_id(data.get("platform")),
            oob_ip_id=nested_id(data.get("oob_ip")),
            site_id=nested_id(data.get("site")),
            role_id=nested_id(data.get("role") or data.get("device_role")),
        )


class InventoryInterface(InventoryRecord):
    name: str = ""
    device_id: int = 0
    lag_id: int | None = None
    type: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryInterface":
        lag = data.get("lag")
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            device_id=nested_id(data.get("device")),
            lag_id=nested_id(lag) if lag else None,
            type=choice_value(data.get("type")),
        )


class InventoryIPAddress(InventoryRecord):
    address: str = ""
    assigned_interface_id: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryIPAddress":
        return cls(
            id=data["id"],
            address=data.get("address") or "",
            assigned_interface_id=int(data.get("assigned_object_id") or 0),
        )


class InventoryPlatform(InventoryRecord):
    name: str = ""
    slug: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryPlatform":
        return cls(id=data["id"], name=data.get("name") or "", slug=data.get("slug") or "")


class InventoryRole(InventoryRecord):
    name: str = ""
    slug: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryRole":
        return cls(id=data["id"], name=data.get("name") or "", slug=data.get("slug") or "")


class InventorySite(InventoryRecord):
    name: str = ""
    slug: str = ""
    region_id: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventorySite":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            region_id=nested_id(data.get("region")),
        )


class InventoryRegion(InventoryRecord):
    name: str = ""
    slug: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryRegion":
        return cls(id=data["id"], name=data.get("name") or "", slug=data.get("slug") or "")


class InventoryVlan(InventoryRecord):
    name: str = ""
    vid: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryVlan":
        return cls(id=data["id"], name=data.get("name") or "", vid=int(data.get("vid") or 0))


class InventoryPrefix(InventoryRecord):
    prefix: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryPrefix":
        return cls(id=data["id"], prefix=data.get("prefix") or "")


class InventoryTag(InventoryRecord):
    name: str = ""
    slug: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "InventoryTag":
        return cls(id=data["id"], name=data.get("name") or "", slug=data.get("slug") or "")


class WritableDevice(BaseModel):
    """PATCH body for a device. Unset fields are left untouched upstream."""

    name: str | None = None
    status: str | None = None
    platform: int | None = None
    oob_ip: int | None = None
    site: int | None = None
    role: int | None = None


class WritableInterface(BaseModel):
    """PATCH body for an interface."""

    name: str | None = None
    device: int | None = None
    type: str | None = None


class ListResponse(BaseModel, Generic[T]):
    """Result of a list call: total count plus the returned records."""

    count: int = 0
    results: list[T] = Field(default_factory=list)
