from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from mantl_install.core.exceptions import RepositoryNotFoundError, StoreError
from mantl_install.core.kv.base import KeyValueStore

logger = logging.getLogger(__name__)

REPOSITORY_ROOT = "mantl-install/repository"


@dataclass(frozen=True)
class RepositoryLayer:
    """A single indexed repository. Index 0 is the base layer."""

    name: str
    index: int
    root: str = REPOSITORY_ROOT

    @property
    def is_base(self) -> bool:
        return self.index == 0

    @property
    def layer_key(self) -> str:
        return posixpath.join(self.root, str(self.index))

    @property
    def name_key(self) -> str:
        return posixpath.join(self.layer_key, "name")

    @property
    def package_index_key(self) -> str:
        return posixpath.join(self.layer_key, "repo/meta/index.json")

    @property
    def packages_key(self) -> str:
        return posixpath.join(self.layer_key, "repo/packages")

    def document_key(self, package_version_key: str, filename: str) -> str:
        """Key of ``filename`` for a package version (``<C>/<N>/<R>``) in this layer."""
        return posixpath.join(self.packages_key, package_version_key, filename)

    def to_dict(self) -> dict:
        return {"name": self.name, "index": self.index, "base": self.is_base}


class RepositoryLayerSet:
    """Repository layers ordered by index (low → high precedence)."""

    def __init__(self, layers: Iterable[RepositoryLayer]) -> None:
        ordered = sorted(layers, key=lambda layer: layer.index)
        seen = set()
        for layer in ordered:
            if layer.index < 0:
                raise ValueError(f"Repository '{layer.name}' has negative index {layer.index}.")
            if layer.index in seen:
                raise ValueError(f"Duplicate repository index {layer.index}.")
            seen.add(layer.index)
        self._layers: Tuple[RepositoryLayer, ...] = tuple(ordered)

    def __iter__(self) -> Iterator[RepositoryLayer]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def base(self) -> RepositoryLayer:
        for layer in self._layers:
            if layer.is_base:
                return layer
        raise RepositoryNotFoundError("No base repository (index 0) is configured")

    def override_layers(self) -> List[RepositoryLayer]:
        """Return non-base layers in ascending index order."""
        return [layer for layer in self._layers if not layer.is_base]

    def all(self) -> List[RepositoryLayer]:
        """Return every layer: base first, then overrides ascending."""
        return list(self._layers)

    def layer_by_index(self, index: int) -> Optional[RepositoryLayer]:
        for layer in self._layers:
            if layer.index == index:
                return layer
        return None


def _parse_index(key: str) -> Optional[int]:
    segment = key.rstrip("/").rsplit("/", 1)[-1]
    try:
        return int(segment)
    except ValueError:
        return None


def discover_layers(store: KeyValueStore, root: str = REPOSITORY_ROOT) -> RepositoryLayerSet:
    """Discover repository layers stored under ``root``.

    Child keys of ``<root>/`` are expected to be ``<root>/<index>/``; each
    layer's display name lives at ``<root>/<index>/name``. Layers with a
    non-numeric index or an unreadable name are skipped with a warning.

    Raises:
        StoreError: if the root itself cannot be listed.
    """
    root = root.strip("/")
    layers: List[RepositoryLayer] = []
    for key in store.list_child_keys(root + "/"):
        idx = _parse_index(key)
        if idx is None or idx < 0:
            logger.warning("Unexpected repository index at %s", key)
            continue

        probe = RepositoryLayer(name="", index=idx, root=root)
        try:
            raw = store.get(probe.name_key)
        except StoreError as exc:
            logger.warning("Could not find name for repository %d: %s", idx, exc)
            continue
        if raw is None:
            logger.warning("Could not find name for repository %d: %s is missing", idx, probe.name_key)
            continue

        try:
            name = raw.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            logger.warning("Could not decode name for repository %d: %s", idx, exc)
            continue
        layers.append(RepositoryLayer(name=name, index=idx, root=root))

    return RepositoryLayerSet(layers)


__all__ = [
    "REPOSITORY_ROOT",
    "RepositoryLayer",
    "RepositoryLayerSet",
    "discover_layers",
]
