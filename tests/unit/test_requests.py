"""Tests for inventory list request filters."""

from hwsync.inventory.requests import (
    ListClustersRequest,
    ListDevicesRequest,
    ListInterfacesRequest,
    ListIPAddressesRequest,
    ListPrefixesRequest,
    ListTagsRequest,
)


class TestListRequestBuild:
    """Only set fields become query filters."""

    def test_empty_request_builds_empty_query(self):
        assert ListDevicesRequest().build() == {}
        assert ListInterfacesRequest().build() == {}

    def test_zero_id_is_not_a_filter(self):
        """A zero id means 'unset'."""
        query = ListDevicesRequest(id=0, cluster_id=7).build()
        assert query == {"cluster_id": 7}

    def test_empty_string_is_not_a_filter(self):
        query = ListClustersRequest(name="", region="eu-de-1", cluster_type="kvm").build()
        assert query == {"region": "eu-de-1", "type": "kvm"}

    def test_cluster_type_maps_to_type_key(self):
        query = ListClustersRequest(name="c1", cluster_type="kvm").build()
        assert "type" in query
        assert "cluster_type" not in query

    def test_interface_filters_combine(self):
        query = ListInterfacesRequest(name="remoteboard", device_id=12).build()
        assert query == {"name": "remoteboard", "device_id": 12}

    def test_lag_filter(self):
        assert ListInterfacesRequest(lag_id=3).build() == {"lag_id": 3}

    def test_ip_address_filters(self):
        assert ListIPAddressesRequest(interface_id=5).build() == {"interface_id": 5}
        assert ListIPAddressesRequest(address="10.0.0.1/24").build() == {"address": "10.0.0.1/24"}

    def test_prefix_and_tag_filters(self):
        assert ListPrefixesRequest(contains="10.0.0.1").build() == {"contains": "10.0.0.1"}
        assert ListTagsRequest(name="managed").build() == {"name": "managed"}
