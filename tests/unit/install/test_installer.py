from __future__ import annotations

import json
from pathlib import Path

import pytest

from mantl_install.core.config import InstallConfig
from mantl_install.core.exceptions import PackageNotFoundError, RepositoryNotFoundError
from mantl_install.core.install import Installer, PackageRequest
from mantl_install.core.kv.memory import MemoryStore
from mantl_install.core.repository import RepositoryLayer, RepositoryLayerSet


def test_end_to_end_render(zk_repo) -> None:
    rendered = Installer(zk_repo.store).render(PackageRequest(name="zookeeper"))

    assert rendered.definition.version == "0.2"
    assert rendered.config == {"instances": 5, "framework-name": "zookeeper"}
    assert rendered.app_json == "count=5"
    assert rendered.to_dict()["appJson"] == "count=5"


def test_requested_version_is_honoured(zk_repo) -> None:
    rendered = Installer(zk_repo.store).render(PackageRequest(name="zookeeper", version="0.1"))

    assert rendered.definition.release == "0"
    assert rendered.app_json == "count=3"


def test_request_config_overrides_everything(zk_repo) -> None:
    request = PackageRequest(name="ZOOKEEPER", config={"instances": 7})

    assert Installer(zk_repo.store).render(request).app_json == "count=7"


def test_unknown_package_is_not_found(zk_repo) -> None:
    with pytest.raises(PackageNotFoundError):
        Installer(zk_repo.store).package_definition("kafka")


def test_listing_and_lookup(zk_repo) -> None:
    installer = Installer(zk_repo.store)

    assert [p.name for p in installer.packages()] == ["zookeeper"]
    assert installer.package("zookeeper").current_version == "0.2"
    assert installer.package("kafka") is None
    assert len(installer.layers()) == 2


def test_explicit_layers_skip_discovery(zk_repo) -> None:
    layers = RepositoryLayerSet([RepositoryLayer("mantl-universe", 0)])
    installer = Installer(zk_repo.store, layers=layers)

    # Without the override layer nothing is supported and options are not applied.
    assert installer.package("zookeeper").supported is False
    assert installer.render(PackageRequest(name="zookeeper")).app_json == "count=3"


def test_empty_store_has_no_base_repository() -> None:
    with pytest.raises(RepositoryNotFoundError):
        Installer(MemoryStore()).packages()


def test_from_config_with_seeded_memory_store(zk_repo, tmp_path: Path) -> None:
    seed = tmp_path / "seed.json"
    seed.write_text(
        json.dumps({k: zk_repo.store.get(k).decode() for k in zk_repo.store.keys()}),
        encoding="utf-8",
    )
    config = InstallConfig.load(
        environ={
            "MANTL_INSTALL_STORE__BACKEND": "memory",
            "MANTL_INSTALL_STORE__SEED_FILE": str(seed),
            "MANTL_INSTALL_RESOLUTION__MAX_WORKERS": "4",
        },
    )

    installer = Installer.from_config(config)

    assert isinstance(installer.store, MemoryStore)
    assert installer.max_workers == 4
    assert installer.render(PackageRequest(name="zookeeper")).app_json == "count=5"


def test_template_reads_hyphenated_framework_name(zk_repo) -> None:
    zk_repo.document(1, "Z/zookeeper/1", "marathon.json", '{"id": "/{{framework-name}}", "n": {{instances}}}')

    rendered = Installer(zk_repo.store).render(PackageRequest(name="zookeeper"))

    assert rendered.definition.framework_name == "zookeeper"
    assert rendered.app_json == '{"id": "/zookeeper", "n": 5}'


def test_template_sections_render_end_to_end(zk_repo) -> None:
    zk_repo.document(1, "Z/zookeeper/1", "marathon.json", "{{#debug}}verbose {{/debug}}n={{instances}}")

    installer = Installer(zk_repo.store)

    assert installer.render(PackageRequest(name="zookeeper")).app_json == "n=5"
    request = PackageRequest(name="zookeeper", config={"debug": True})
    assert installer.render(request).app_json == "verbose n=5"
