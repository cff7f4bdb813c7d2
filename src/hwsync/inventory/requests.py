"""List request filters for the inventory API.

Each request holds optional filter fields. ``build()`` turns it into the
query mapping handed to the transport; only non-zero ids and non-empty
strings become filters, so an empty field never narrows a query.
"""

from dataclasses import dataclass, field, fields
from typing import Any


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, str)):
        return bool(value)
    return True


@dataclass
class ListRequest:
    """Base class; subclasses declare filter fields.

    A field's ``metadata["query"]`` overrides the query key used for it.
    """

    def build(self) -> dict[str, Any]:
        query: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if _is_set(value):
                query[f.metadata.get("query", f.name)] = value
        return query


def _field(default: Any, query: str | None = None) -> Any:
    metadata = {"query": query} if query else {}
    return field(default=default, metadata=metadata)


@dataclass
class ListClustersRequest(ListRequest):
    name: str = ""
    region: str = ""
    cluster_type: str = _field("", query="type")


@dataclass
class ListDevicesRequest(ListRequest):
    name: str = ""
    id: int = 0
    cluster_id: int = 0


@dataclass
class ListDeviceRolesRequest(ListRequest):
    name: str = ""


@dataclass
class ListInterfacesRequest(ListRequest):
    name: str = ""
    id: int = 0
    device_id: int = 0
    lag_id: int = 0


@dataclass
class ListPlatformsRequest(ListRequest):
    name: str = ""


@dataclass
class ListIPAddressesRequest(ListRequest):
    interface_id: int = 0
    address: str = ""


@dataclass
class ListVlansRequest(ListRequest):
    name: str = ""


@dataclass
class ListPrefixesRequest(ListRequest):
    contains: str = ""


@dataclass
class ListTagsRequest(ListRequest):
    name: str = ""
