from __future__ import annotations

import json

import pytest

from mantl_install.core.exceptions import IndexParseError, PackageIndexNotFoundError
from mantl_install.core.packages import PackageCatalog
from mantl_install.core.repository import discover_layers


def _catalog(repo, max_workers: int = 1) -> PackageCatalog:
    return PackageCatalog(repo.store, discover_layers(repo.store), max_workers=max_workers)


def _cassandra(repo, current: str = "") -> None:
    repo.layer(0, "base").layer(1, "override")
    repo.index([
        {"name": "cassandra", "currentVersion": current, "versions": {"1.0": "5", "1.2": "9"}},
    ])


def test_support_comes_from_override_options(zk_repo) -> None:
    (pkg,) = _catalog(zk_repo).list()

    assert pkg.supported is True
    assert pkg.versions["0.2"].supported is True
    assert pkg.versions["0.1"].supported is False


def test_unsupported_current_version_moves_to_latest_supported(zk_repo) -> None:
    (pkg,) = _catalog(zk_repo).list()

    assert pkg.current_version == "0.2"


def test_base_layer_options_do_not_mark_support(repo) -> None:
    _cassandra(repo, current="1.0")
    repo.document(0, "C/cassandra/9", "mantl.json", {})

    (pkg,) = _catalog(repo).list()

    assert pkg.supported is False
    assert pkg.current_version == "1.0"


def test_latest_supported_by_release_index(repo) -> None:
    _cassandra(repo)
    repo.document(1, "C/cassandra/5", "mantl.json", {})
    repo.document(1, "C/cassandra/9", "mantl.json", {})

    (pkg,) = _catalog(repo).list()

    assert pkg.current_version == "1.2"


def test_supported_current_version_is_kept(repo) -> None:
    _cassandra(repo, current="1.0")
    repo.document(1, "C/cassandra/5", "mantl.json", {})
    repo.document(1, "C/cassandra/9", "mantl.json", {})

    (pkg,) = _catalog(repo).list()

    assert pkg.current_version == "1.0"


def test_probe_failure_is_a_warning_not_an_error(repo, caplog) -> None:
    _cassandra(repo)
    repo.layer(2, "second-override")
    repo.document(2, "C/cassandra/5", "mantl.json", {})
    failing = repo.key(1, "C/cassandra/5", "mantl.json")
    repo.store.fail(failing)

    catalog = _catalog(repo)
    with caplog.at_level("WARNING", logger="mantl_install"):
        (pkg,) = catalog.list()

    assert pkg.versions["1.0"].supported is True
    assert pkg.current_version == "1.0"
    assert [w.key for w in catalog.warnings] == [failing]
    assert catalog.warnings[0].layer == "override"
    assert catalog.warnings[0].to_dict()["layerIndex"] == 1
    assert failing in caplog.text


def test_failing_probe_does_not_hide_other_packages(repo) -> None:
    repo.layer(0, "base").layer(1, "override")
    repo.index([
        {"name": "a", "versions": {"1": "0"}},
        {"name": "b", "versions": {"1": "0"}},
    ])
    repo.store.fail(repo.key(1, "A/a/0", "mantl.json"))
    repo.document(1, "B/b/0", "mantl.json", {})

    packages = {pkg.name: pkg for pkg in _catalog(repo).list()}

    assert packages["a"].supported is False
    assert packages["b"].supported is True


def test_concurrent_probing_matches_sequential(repo) -> None:
    repo.layer(0, "base").layer(1, "o1").layer(2, "o2")
    repo.index([
        {"name": f"pkg{i}", "versions": {"1": "0", "2": "1"}} for i in range(6)
    ])
    for i in range(0, 6, 2):
        repo.document(2, f"P/pkg{i}/1", "mantl.json", {})

    sequential = [p.to_dict() for p in _catalog(repo).list()]
    concurrent = [p.to_dict() for p in _catalog(repo, max_workers=8).list()]

    assert sequential == concurrent


def test_missing_index_is_not_found(repo) -> None:
    repo.layer(0, "base")

    with pytest.raises(PackageIndexNotFoundError):
        _catalog(repo).list()


@pytest.mark.parametrize("raw", ["{not json", json.dumps({"packages": {"a": 1}}), json.dumps([1])])
def test_malformed_index_raises_parse_error(repo, raw: str) -> None:
    repo.layer(0, "base")
    repo.store.put("mantl-install/repository/0/repo/meta/index.json", raw)

    with pytest.raises(IndexParseError) as excinfo:
        _catalog(repo).list()
    assert excinfo.value.key.endswith("repo/meta/index.json")


def test_index_tolerates_key_case_and_bad_entries(repo, caplog) -> None:
    repo.layer(0, "base")
    repo.store.put(
        "mantl-install/repository/0/repo/meta/index.json",
        json.dumps({"Packages": [{"Name": "kafka", "Versions": {"1": "0"}}, {"versions": {}}]}),
    )

    with caplog.at_level("WARNING", logger="mantl_install"):
        packages = _catalog(repo).list()

    assert [p.name for p in packages] == ["kafka"]
    assert "Skipping index entry 1" in caplog.text


def test_find_by_name(zk_repo) -> None:
    catalog = _catalog(zk_repo)

    assert catalog.find_by_name(" ZooKeeper ").name == "zookeeper"
    assert catalog.find_by_name("kafka") is None


def test_index_entry_with_string_framework_is_skipped(repo, caplog) -> None:
    repo.layer(0, "base")
    repo.index([
        {"name": "kafka", "framework": "false", "versions": {"1": "0"}},
        {"name": "zookeeper", "framework": False, "versions": {"1": "0"}},
    ])

    with caplog.at_level("WARNING", logger="mantl_install"):
        packages = _catalog(repo).list()

    assert [(p.name, p.framework) for p in packages] == [("zookeeper", False)]
    assert "framework of 'kafka' is not a boolean" in caplog.text
