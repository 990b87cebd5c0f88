from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Union

import pytest

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'mantl_install'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from mantl_install.core.kv.memory import MemoryStore  # noqa: E402
from mantl_install.core.stdlib_logging import reset_stdlib_logging_for_tests  # noqa: E402

ROOT = "mantl-install/repository"


class RepoBuilder:
    """Write layered repository data into a MemoryStore."""

    def __init__(self, store: MemoryStore, root: str = ROOT) -> None:
        self.store = store
        self.root = root

    def layer(self, index: int, name: str) -> "RepoBuilder":
        self.store.put(f"{self.root}/{index}/name", name)
        return self

    def index(self, packages: List[Dict[str, Any]], layer: int = 0) -> "RepoBuilder":
        self.store.put(
            f"{self.root}/{layer}/repo/meta/index.json",
            json.dumps({"packages": packages}),
        )
        return self

    def key(self, layer: int, version_key: str, filename: str) -> str:
        return f"{self.root}/{layer}/repo/packages/{version_key}/{filename}"

    def document(
        self,
        layer: int,
        version_key: str,
        filename: str,
        content: Union[str, Dict[str, Any]],
    ) -> "RepoBuilder":
        if not isinstance(content, str):
            content = json.dumps(content)
        self.store.put(self.key(layer, version_key, filename), content)
        return self


ZK_SCHEMA = {
    "type": "object",
    "properties": {
        "instances": {"type": "integer", "default": 3},
        "framework-name": {"type": "string", "default": "zookeeper"},
    },
}


def seed_zookeeper(repo: RepoBuilder) -> RepoBuilder:
    """Base layer ships zookeeper 0.1 and 0.2; override layer supports 0.2."""
    repo.layer(0, "mantl-universe").layer(1, "mantl")
    repo.index([
        {
            "name": "zookeeper",
            "description": "Coordination service",
            "framework": True,
            "currentVersion": "0.1",
            "tags": ["coordination"],
            "versions": {"0.1": "0", "0.2": "1"},
        },
    ])
    for release in ("0", "1"):
        vk = f"Z/zookeeper/{release}"
        repo.document(0, vk, "command.json", {"pip": []})
        repo.document(0, vk, "config.json", ZK_SCHEMA)
        repo.document(0, vk, "marathon.json", "count={{instances}}")
        repo.document(0, vk, "package.json", {"name": "zookeeper"})
    repo.document(1, "Z/zookeeper/1", "mantl.json", {"instances": 5})
    return repo


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def repo(store: MemoryStore) -> RepoBuilder:
    return RepoBuilder(store)


@pytest.fixture
def zk_repo(repo: RepoBuilder) -> RepoBuilder:
    return seed_zookeeper(repo)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep host MANTL_INSTALL_* variables and log handlers out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("MANTL_INSTALL_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_stdlib_logging_for_tests()
