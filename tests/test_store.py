"""Tests for the record store / query engine."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from netmap import store
from netmap.errors import InvalidArgumentError, ResourceNotFoundError
from netmap.models import NetworkInfoFields, NetworkMap, ResourceFields


@pytest.fixture
def network_map() -> NetworkMap:
    return NetworkMap.empty()


@pytest.fixture
def web01(network_map: NetworkMap):
    return store.add_resource(
        network_map,
        ResourceFields(
            hostname="Web01",
            ip="10.0.0.5",
            description="Front web server",
            aliases=["www", "frontend"],
            os="Ubuntu 22.04",
            services=["nginx", "SSH"],
            ssh_user="deploy",
            ssh_port=22,
            metadata={"rack": "A1"},
        ),
    )


class TestAddResource:
    def test_generates_id_and_timestamp(self, network_map: NetworkMap):
        r = store.add_resource(network_map, ResourceFields(hostname="router", ip="10.0.0.1"))
        assert r.id.startswith("res_")
        assert r.last_updated is not None
        assert network_map.resources == [r]

    def test_copies_optional_fields(self, web01):
        assert web01.aliases == ["www", "frontend"]
        assert web01.services == ["nginx", "SSH"]
        assert web01.ssh_port == 22
        assert web01.metadata == {"rack": "A1"}

    def test_ids_unique(self, network_map: NetworkMap):
        ids = [
            store.add_resource(network_map, ResourceFields(hostname=f"h{i}", ip="10.0.0.1")).id
            for i in range(200)
        ]
        assert len(set(ids)) == len(ids)

    def test_appends_in_order(self, network_map: NetworkMap):
        for name in ["a", "b", "c"]:
            store.add_resource(network_map, ResourceFields(hostname=name, ip="10.0.0.1"))
        assert [r.hostname for r in network_map.resources] == ["a", "b", "c"]

    @pytest.mark.parametrize(
        "fields",
        [
            ResourceFields(ip="10.0.0.1"),
            ResourceFields(hostname="", ip="10.0.0.1"),
            ResourceFields(hostname="router"),
            ResourceFields(hostname="router", ip=""),
        ],
    )
    def test_requires_hostname_and_ip(self, network_map: NetworkMap, fields):
        with pytest.raises(InvalidArgumentError):
            store.add_resource(network_map, fields)
        assert network_map.resources == []


class TestGenerateId:
    def test_skips_existing(self, monkeypatch):
        tokens = iter(["aaaaaaaaaaaa", "bbbbbbbbbbbb"])
        monkeypatch.setattr(store, "secrets", SimpleNamespace(token_hex=lambda n: next(tokens)))
        monkeypatch.setattr(store, "time", SimpleNamespace(time=lambda: 1.0))
        assert store.generate_id({"res_1000_aaaaaaaaaaaa"}) == "res_1000_bbbbbbbbbbbb"


class TestSearch:
    def test_case_insensitive_multi_field(self, network_map: NetworkMap, web01):
        for query in ["NGINX", "10.0.0.5", "web", "WWW", "ubuntu", "front web"]:
            assert store.search(network_map, query) == [web01], query

    def test_no_match(self, network_map: NetworkMap, web01):
        assert store.search(network_map, "zzz-nomatch") == []

    def test_does_not_search_ssh_or_metadata(self, network_map: NetworkMap, web01):
        assert store.search(network_map, "deploy") == []
        assert store.search(network_map, "rack") == []

    def test_stored_order(self, network_map: NetworkMap):
        b = store.add_resource(network_map, ResourceFields(hostname="db-2", ip="10.0.0.9"))
        a = store.add_resource(network_map, ResourceFields(hostname="db-1", ip="10.0.0.8"))
        assert store.search(network_map, "db") == [b, a]

    @pytest.mark.parametrize("query", ["", None])
    def test_empty_query_is_error(self, network_map: NetworkMap, query):
        with pytest.raises(InvalidArgumentError):
            store.search(network_map, query)


class TestUpdateResource:
    def test_partial_update_is_non_destructive(self, network_map: NetworkMap, web01):
        before = web01.to_dict()
        updated = store.update_resource(network_map, web01.id, ResourceFields(description="x"))
        after = updated.to_dict()

        assert after["description"] == "x"
        before.pop("description"), after.pop("description")
        before.pop("lastUpdated"), after.pop("lastUpdated")
        assert after == before

    def test_explicit_empty_values_overwrite(self, network_map: NetworkMap, web01):
        store.update_resource(
            network_map,
            web01.id,
            ResourceFields(description="", aliases=[], os="", services=[], ssh_user="", metadata={}),
        )
        assert web01.description == ""
        assert web01.aliases == []
        assert web01.os == ""
        assert web01.services == []
        assert web01.ssh_user == ""
        assert web01.metadata == {}

    def test_refreshes_last_updated(self, network_map: NetworkMap, web01, monkeypatch):
        monkeypatch.setattr(store, "utc_now", lambda: "2030-01-01T00:00:00.000Z")
        store.update_resource(network_map, web01.id, ResourceFields())
        assert web01.last_updated == "2030-01-01T00:00:00.000Z"

    def test_unknown_id(self, network_map: NetworkMap, web01):
        with pytest.raises(ResourceNotFoundError, match="res_missing"):
            store.update_resource(network_map, "res_missing", ResourceFields(os="x"))

    def test_rejects_empty_hostname(self, network_map: NetworkMap, web01):
        with pytest.raises(InvalidArgumentError):
            store.update_resource(network_map, web01.id, ResourceFields(hostname="", os="x"))
        assert web01.hostname == "Web01"
        assert web01.os == "Ubuntu 22.04"


class TestDeleteResource:
    def test_removes_exactly_one(self, network_map: NetworkMap):
        a, b, c = (
            store.add_resource(network_map, ResourceFields(hostname=n, ip="10.0.0.1"))
            for n in "abc"
        )
        snapshot = [a.to_dict(), c.to_dict()]

        removed = store.delete_resource(network_map, b.id)
        assert removed is b
        assert [r.to_dict() for r in network_map.resources] == snapshot

    def test_unknown_id_leaves_resources(self, network_map: NetworkMap, web01):
        with pytest.raises(ResourceNotFoundError):
            store.delete_resource(network_map, "res_missing")
        assert network_map.resources == [web01]


class TestSetNetworkInfo:
    def test_only_supplied_fields(self, network_map: NetworkMap):
        store.set_network_info(
            network_map,
            NetworkInfoFields(network_name="home", network_cidr="10.0.0.0/24", gateway="10.0.0.1"),
        )
        store.set_network_info(network_map, NetworkInfoFields(gateway="10.0.0.254"))
        assert network_map.network_name == "home"
        assert network_map.network_cidr == "10.0.0.0/24"
        assert network_map.gateway == "10.0.0.254"

    def test_no_cidr_validation(self, network_map: NetworkMap):
        store.set_network_info(network_map, NetworkInfoFields(network_cidr="not-a-cidr"))
        assert network_map.network_cidr == "not-a-cidr"


class TestSummarizeServices:
    def test_distinct_sorted(self, network_map: NetworkMap):
        store.add_resource(
            network_map,
            ResourceFields(hostname="a", ip="1", services=["nginx", "Docker"], os="Ubuntu"),
        )
        store.add_resource(
            network_map,
            ResourceFields(hostname="b", ip="2", services=["docker", "nginx"], os="Debian"),
        )
        store.add_resource(network_map, ResourceFields(hostname="c", ip="3", os="Ubuntu"))

        summary = store.summarize_services(network_map)
        assert summary.services == ["Docker", "docker", "nginx"]
        assert summary.operating_systems == ["Debian", "Ubuntu"]

    def test_ssh_exclusion_rule(self, network_map: NetworkMap):
        store.add_resource(network_map, ResourceFields(hostname="plain", ip="1"))
        store.add_resource(network_map, ResourceFields(hostname="user-only", ip="2", ssh_user="pi"))
        store.add_resource(network_map, ResourceFields(hostname="port-only", ip="3", ssh_port=2222))

        configs = store.summarize_services(network_map).ssh_configs
        assert [(c.hostname, c.user, c.port) for c in configs] == [
            ("user-only", "pi", None),
            ("port-only", None, 2222),
        ]
        assert len(store.list_all(network_map)) == 3

    def test_empty_map(self, network_map: NetworkMap):
        summary = store.summarize_services(network_map)
        assert summary.services == []
        assert summary.operating_systems == []
        assert summary.ssh_configs == []


class TestScenario:
    def test_router_lifecycle(self, network_map: NetworkMap):
        router = store.add_resource(network_map, ResourceFields(hostname="router", ip="10.0.0.1"))
        assert router.id and router.last_updated

        updated = store.update_resource(network_map, router.id, ResourceFields(ssh_port=2222))
        assert updated.id == router.id
        assert updated.ssh_port == 2222
        assert updated.ip == "10.0.0.1"

        [cfg] = store.summarize_services(network_map).ssh_configs
        assert (cfg.hostname, cfg.user, cfg.port) == ("router", None, 2222)

        removed = store.delete_resource(network_map, router.id)
        assert removed.id == router.id
        assert store.list_all(network_map) == []
