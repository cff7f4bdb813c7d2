"""Cluster lookup."""

from typing import Protocol

from hwsync.inventory.api import VirtualizationAPI
from hwsync.inventory.base import call_upstream, exactly_one
from hwsync.inventory.models import InventoryCluster
from hwsync.inventory.requests import ListClustersRequest


class Virtualization(Protocol):
    def get_cluster_by_name(self, name: str) -> InventoryCluster: ...

    def get_cluster_by_name_region_type(
        self, name: str, region: str, cluster_type: str
    ) -> InventoryCluster: ...


class VirtualizationService:
    """Resolves clusters; every lookup must match exactly one record."""

    def __init__(self, api: VirtualizationAPI) -> None:
        self.api = api

    def get_cluster_by_name(self, name: str) -> InventoryCluster:
        query = ListClustersRequest(name=name).build()
        res = call_upstream(f"unable to list clusters by name {name}", self.api.list_clusters, query)
        return exactly_one(res, "unexpected number of clusters found")

    def get_cluster_by_name_region_type(
        self, name: str, region: str, cluster_type: str
    ) -> InventoryCluster:
        """Resolve a cluster from a descriptor triple.

        Empty fields are not used as filters, so ``name=""`` matches any
        cluster in the region with the given type.
        """
        query = ListClustersRequest(name=name, region=region, cluster_type=cluster_type).build()
        res = call_upstream(
            f"unable to list clusters (name={name!r}, region={region!r}, type={cluster_type!r})",
            self.api.list_clusters,
            query,
        )
        return exactly_one(res, "unexpected number of clusters found")
