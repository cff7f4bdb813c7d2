"""Tests for update spec loading."""

import pytest

from hwsync.core.errors import ConfigError
from hwsync.sync.models import ClusterDescriptor
from hwsync.sync.source import FileUpdateSource, StaticUpdateSource, load_update_specs

UPDATES_YAML = """
updates:
  - name: update-eu-de-1
    clusters:
      - name: ""
        region: eu-de-1
        type: kvm
      - name: cluster7
  - name: update-eu-de-2
"""


@pytest.fixture
def updates_file(tmp_path):
    path = tmp_path / "updates.yaml"
    path.write_text(UPDATES_YAML, encoding="utf-8")
    return path


class TestLoadUpdateSpecs:
    def test_parse(self, updates_file):
        specs = load_update_specs(updates_file)

        assert [s.name for s in specs] == ["update-eu-de-1", "update-eu-de-2"]
        assert specs[0].clusters == [
            ClusterDescriptor(name="", region="eu-de-1", type="kvm"),
            ClusterDescriptor(name="cluster7"),
        ]
        assert specs[1].clusters == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="updates file not found"):
            load_update_specs(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_update_specs(path) == []

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("updates: [\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="unable to parse"):
            load_update_specs(path)

    def test_duplicate_names(self, tmp_path):
        path = tmp_path / "dup.yaml"
        path.write_text("updates:\n  - name: a\n  - name: a\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="duplicate update name: a"):
            load_update_specs(path)

    def test_empty_name(self, tmp_path):
        path = tmp_path / "noname.yaml"
        path.write_text("updates:\n  - name: ' '\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="invalid updates file"):
            load_update_specs(path)


class TestUpdateSources:
    def test_file_source_rereads(self, updates_file):
        source = FileUpdateSource(updates_file)
        assert source.keys() == ["update-eu-de-1", "update-eu-de-2"]

        updates_file.write_text("updates:\n  - name: update-eu-de-2\n", encoding="utf-8")

        assert source.keys() == ["update-eu-de-2"]
        assert source.get("update-eu-de-1") is None
        assert source.get("update-eu-de-2").name == "update-eu-de-2"

    def test_static_source(self, updates_file):
        source = StaticUpdateSource(load_update_specs(updates_file))

        assert source.keys() == ["update-eu-de-1", "update-eu-de-2"]
        assert source.get("update-eu-de-1").clusters[1].name == "cluster7"
        assert source.get("nope") is None
