"""Entry point wiring one resolution request end to end.

    store -> layers -> catalog -> version -> descriptor documents
          -> merged configuration -> rendered deployment descriptor

Nothing is cached between calls: every method reads the store afresh.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from mantl_install.core.exceptions import PackageNotFoundError
from mantl_install.core.kv.base import KeyValueStore
from mantl_install.core.packages.catalog import PackageCatalog
from mantl_install.core.packages.models import Package
from mantl_install.core.packages.resolver import resolve_version
from mantl_install.core.repository.layers import REPOSITORY_ROOT, RepositoryLayerSet, discover_layers

from .assembler import FRAMEWORK_NAME_KEY, DescriptorAssembler
from .definition import PackageDefinition
from .request import PackageRequest

logger = logging.getLogger(__name__)


class Installer:
    """Resolve packages and their deployment descriptors from a layered store.

    ``layers`` may be supplied directly; otherwise they are discovered under
    ``root`` on every call.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        root: str = REPOSITORY_ROOT,
        layers: Optional[RepositoryLayerSet] = None,
        max_workers: int = 1,
        framework_name_key: str = FRAMEWORK_NAME_KEY,
    ) -> None:
        self.store = store
        self.root = root
        self._layers = layers
        self.max_workers = max_workers
        self.framework_name_key = framework_name_key

    @classmethod
    def from_config(cls, config: Any, store: Optional[KeyValueStore] = None) -> "Installer":
        """Build an installer from an ``InstallConfig``."""
        from mantl_install.core.kv import open_store

        return cls(
            store if store is not None else open_store(config),
            root=config.repository_root,
            max_workers=config.max_workers,
            framework_name_key=config.framework_name_key,
        )

    def layers(self) -> RepositoryLayerSet:
        if self._layers is not None:
            return self._layers
        return discover_layers(self.store, self.root)

    def catalog(self, layers: Optional[RepositoryLayerSet] = None) -> PackageCatalog:
        return PackageCatalog(self.store, layers or self.layers(), max_workers=self.max_workers)

    def packages(self) -> List[Package]:
        return self.catalog().list()

    def package(self, name: str) -> Optional[Package]:
        return self.catalog().find_by_name(name)

    def package_definition(self, name: str, version: str = "") -> PackageDefinition:
        """Resolve ``name``/``version`` and assemble its descriptor documents.

        Raises:
            PackageNotFoundError: no package called ``name``.
            NoInstallableVersionError: the package has no versions.
            StoreError, SchemaParseError, OptionsParseError: see DescriptorAssembler.
        """
        layers = self.layers()
        pkg = self.catalog(layers).find_by_name(name)
        if pkg is None:
            raise PackageNotFoundError(f"Package {name} not found", context={"package": name})

        pkg_version = resolve_version(pkg, version)
        logger.info("Resolved %s %s to release %s", pkg.name, pkg_version.version, pkg_version.index)

        assembler = DescriptorAssembler(
            self.store,
            layers,
            max_workers=self.max_workers,
            framework_name_key=self.framework_name_key,
        )
        return assembler.assemble(pkg, pkg_version)

    def render(self, request: PackageRequest) -> "RenderedPackage":
        """Resolve a request and render its deployment descriptor."""
        definition = self.package_definition(request.name, request.version)
        config = definition.merged_config(request.config)
        return RenderedPackage(
            definition=definition,
            config=config,
            app_json=definition.render_app_json(request.config),
        )


class RenderedPackage:
    """Merged configuration and rendered descriptor for one request."""

    def __init__(self, definition: PackageDefinition, config: Mapping[str, Any], app_json: str) -> None:
        self.definition = definition
        self.config = dict(config)
        self.app_json = app_json

    def to_dict(self) -> dict:
        return {**self.definition.to_dict(), "config": self.config, "appJson": self.app_json}


__all__ = ["Installer", "RenderedPackage"]
