"""Package catalog built from the base repository index.

Support status is not stored anywhere: a version is supported when at least
one override layer ships an options document (``mantl.json``) for it. The
catalog recomputes this on every ``list()`` by probing each override layer.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from mantl_install.core.exceptions import IndexParseError, PackageIndexNotFoundError
from mantl_install.core.kv.base import KeyValueStore, read_many
from mantl_install.core.repository.layers import RepositoryLayer, RepositoryLayerSet

from .models import Package, PackageIndexEntry

logger = logging.getLogger(__name__)

OPTIONS_DOCUMENT = "mantl.json"


@dataclass(frozen=True)
class LayerProbeWarning:
    """A support probe that could not be answered by one layer."""

    layer: str
    layer_index: int
    key: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer": self.layer,
            "layerIndex": self.layer_index,
            "key": self.key,
            "error": self.error,
        }


class PackageCatalog:
    """Packages of a layered repository set, with support status resolved."""

    def __init__(
        self,
        store: KeyValueStore,
        layers: RepositoryLayerSet,
        *,
        max_workers: int = 1,
    ) -> None:
        self.store = store
        self.layers = layers
        self.max_workers = max_workers
        self.warnings: List[LayerProbeWarning] = []

    def index_entries(self) -> List[PackageIndexEntry]:
        """Read and parse the base layer's package index.

        Entries that cannot be interpreted are skipped with a warning.

        Raises:
            RepositoryNotFoundError: no base layer.
            PackageIndexNotFoundError: the base layer has no index document.
            IndexParseError: the index document is not valid JSON of the expected shape.
            StoreError: the index could not be read.
        """
        base = self.layers.base()
        key = base.package_index_key

        raw = self.store.get(key)
        if raw is None:
            raise PackageIndexNotFoundError(
                f"Package index {key} not found",
                context={"repository": base.name, "key": key},
            )

        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Could not unmarshal index from %s: %s", key, exc)
            raise IndexParseError(f"Could not parse package index {key}", key=key, details=str(exc)) from exc

        packages = None
        if isinstance(document, dict):
            lowered = {str(k).lower(): v for k, v in document.items()}
            packages = lowered.get("packages", [])
        if not isinstance(packages, list):
            logger.error("Unexpected index structure in %s", key)
            raise IndexParseError(f"Package index {key} has no package list", key=key)

        entries: List[PackageIndexEntry] = []
        for position, item in enumerate(packages):
            try:
                entries.append(PackageIndexEntry.from_dict(item))
            except ValueError as exc:
                logger.warning("Skipping index entry %d in %s: %s", position, key, exc)
        return entries

    def list(self) -> List[Package]:
        """Build every package of the base index with support and current version resolved."""
        self.warnings = []
        packages = [entry.to_package() for entry in self.index_entries()]

        overrides = self.layers.override_layers()
        probes = self._probe_keys(packages, overrides)
        results = read_many(self.store, [key for _, _, _, key in probes], max_workers=self.max_workers)

        # Deterministic application pass in package/version/layer order.
        for pkg, version, layer, key in probes:
            result = results[key]
            if result.failed:
                warning = LayerProbeWarning(
                    layer=layer.name,
                    layer_index=layer.index,
                    key=key,
                    error=str(result.error),
                )
                logger.warning("Could not read %s: %s", key, result.error)
                self.warnings.append(warning)
                continue
            if result.found:
                pkg.versions[version].supported = True

        for pkg in packages:
            pkg.supported = pkg.has_supported_version()
            self._set_current_version(pkg)

        return packages

    def find_by_name(self, name: str) -> Optional[Package]:
        """Case-insensitive, trimmed exact lookup. Returns None when absent."""
        wanted = (name or "").strip().casefold()
        for pkg in self.list():
            if pkg.name.casefold() == wanted:
                return pkg
        return None

    def _probe_keys(
        self,
        packages: List[Package],
        overrides: List[RepositoryLayer],
    ) -> List[Tuple[Package, str, RepositoryLayer, str]]:
        probes: List[Tuple[Package, str, RepositoryLayer, str]] = []
        for pkg in packages:
            for version, pv in pkg.versions.items():
                for layer in overrides:
                    key = layer.document_key(pkg.version_key(pv.index), OPTIONS_DOCUMENT)
                    probes.append((pkg, version, layer, key))
        return probes

    def _set_current_version(self, pkg: Package) -> None:
        if not pkg.supported:
            # No supported version: defer to the base repository's choice.
            return

        current = pkg.versions.get(pkg.current_version)
        if current is not None and current.supported:
            return

        latest = pkg.latest_supported_version()
        if latest is not None:
            logger.debug(
                "Current version %s of %s is unsupported, using %s",
                pkg.current_version,
                pkg.name,
                latest.version,
            )
            pkg.current_version = latest.version


__all__ = ["PackageCatalog", "LayerProbeWarning", "OPTIONS_DOCUMENT"]
