from __future__ import annotations

import pytest

from mantl_install.core.exceptions import RepositoryNotFoundError, StoreError
from mantl_install.core.kv.memory import MemoryStore
from mantl_install.core.repository import (
    REPOSITORY_ROOT,
    RepositoryLayer,
    RepositoryLayerSet,
    discover_layers,
)


def test_layer_keys_follow_store_layout() -> None:
    layer = RepositoryLayer(name="mantl", index=1)

    assert layer.name_key == f"{REPOSITORY_ROOT}/1/name"
    assert layer.package_index_key == f"{REPOSITORY_ROOT}/1/repo/meta/index.json"
    assert layer.document_key("Z/zookeeper/3", "config.json") == (
        f"{REPOSITORY_ROOT}/1/repo/packages/Z/zookeeper/3/config.json"
    )
    assert not layer.is_base


def test_layer_set_orders_base_first_then_overrides_ascending() -> None:
    layers = RepositoryLayerSet([
        RepositoryLayer("c", 2),
        RepositoryLayer("a", 0),
        RepositoryLayer("b", 1),
    ])

    assert [layer.name for layer in layers.all()] == ["a", "b", "c"]
    assert layers.base().name == "a"
    assert [layer.index for layer in layers.override_layers()] == [1, 2]
    assert layers.layer_by_index(2).name == "c"
    assert layers.layer_by_index(7) is None


def test_layer_set_rejects_duplicate_and_negative_indexes() -> None:
    with pytest.raises(ValueError):
        RepositoryLayerSet([RepositoryLayer("a", 0), RepositoryLayer("b", 0)])
    with pytest.raises(ValueError):
        RepositoryLayerSet([RepositoryLayer("a", -1)])


def test_missing_base_layer_raises_not_found() -> None:
    layers = RepositoryLayerSet([RepositoryLayer("only-override", 1)])
    with pytest.raises(RepositoryNotFoundError):
        layers.base()


def test_discover_layers_reads_names(repo) -> None:
    repo.layer(0, "mantl-universe").layer(1, " mantl \n")

    layers = discover_layers(repo.store)

    assert [(layer.index, layer.name) for layer in layers] == [(0, "mantl-universe"), (1, "mantl")]


def test_discover_layers_skips_unnamed_and_non_numeric(repo, caplog) -> None:
    repo.layer(0, "base")
    repo.store.put(f"{REPOSITORY_ROOT}/1/repo/meta/index.json", "{}")
    repo.store.put(f"{REPOSITORY_ROOT}/latest/name", "bogus")
    repo.layer(2, "failing")
    repo.store.fail(f"{REPOSITORY_ROOT}/2/name")

    with caplog.at_level("WARNING", logger="mantl_install"):
        layers = discover_layers(repo.store)

    assert [layer.index for layer in layers] == [0]
    assert "Unexpected repository index" in caplog.text
    assert "Could not find name for repository 1" in caplog.text
    assert "Could not find name for repository 2" in caplog.text


def test_discover_layers_honours_custom_root() -> None:
    store = MemoryStore({"custom/root/0/name": "base"})

    layers = discover_layers(store, "/custom/root/")

    assert layers.base().layer_key == "custom/root/0"


def test_discover_layers_propagates_listing_failure() -> None:
    store = MemoryStore()
    store.fail(REPOSITORY_ROOT)

    with pytest.raises(StoreError):
        discover_layers(store)


def test_discover_layers_skips_undecodable_name(repo, caplog) -> None:
    repo.layer(0, "base")
    repo.store.put(f"{REPOSITORY_ROOT}/1/name", b"\xff\xfe")
    repo.layer(2, "site")

    with caplog.at_level("WARNING", logger="mantl_install"):
        layers = discover_layers(repo.store)

    assert [(layer.index, layer.name) for layer in layers] == [(0, "base"), (2, "site")]
    assert "Could not decode name for repository 1" in caplog.text
