"""Assemble a package version's descriptor documents across repository layers.

Layers are visited base first, then overrides in ascending index. For each
document the last layer that defines it (non-empty) wins; document contents
are never merged.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from mantl_install.core.kv.base import KeyValueStore, read_many
from mantl_install.core.packages.models import Package, PackageVersion
from mantl_install.core.repository.layers import RepositoryLayer, RepositoryLayerSet

from .definition import DOCUMENTS, PackageDefinition

logger = logging.getLogger(__name__)

FRAMEWORK_NAME_KEY = "framework-name"


class DescriptorAssembler:
    def __init__(
        self,
        store: KeyValueStore,
        layers: RepositoryLayerSet,
        *,
        max_workers: int = 1,
        framework_name_key: str = FRAMEWORK_NAME_KEY,
    ) -> None:
        self.store = store
        self.layers = layers
        self.max_workers = max_workers
        self.framework_name_key = framework_name_key

    def document_keys(self, package: Package, version: PackageVersion) -> List[Tuple[RepositoryLayer, str, str]]:
        """(layer, document, key) for every layer and document, in precedence order."""
        version_key = package.version_key(version.index)
        return [
            (layer, document, layer.document_key(version_key, document))
            for layer in self.layers.all()
            for document in DOCUMENTS
        ]

    def assemble(self, package: Package, version: PackageVersion) -> PackageDefinition:
        """Collect documents for ``version`` of ``package``.

        Raises:
            StoreError: a document read failed.
            SchemaParseError, OptionsParseError: merged config could not be computed.
        """
        definition = PackageDefinition(
            name=package.name,
            version=version.version,
            release=version.index,
            framework=package.framework,
        )

        targets = self.document_keys(package, version)
        results = read_many(self.store, [key for _, _, key in targets], max_workers=self.max_workers)

        # Apply in layer order after all reads complete.
        for layer, document, key in targets:
            result = results[key]
            if result.failed:
                logger.error("Could not retrieve %s from %s: %s", document, layer.name, result.error)
                raise result.error
            data = result.data
            if len(data) > 0:
                setattr(definition, DOCUMENTS[document], data)
                definition.sources[document] = key

        if not definition.is_valid():
            logger.warning(
                "Package %s %s is missing %s",
                package.name,
                version.version,
                ", ".join(definition.missing_documents()),
            )

        definition.framework_name = self._framework_name(definition) or ""
        return definition

    def _framework_name(self, definition: PackageDefinition) -> Optional[str]:
        value = definition.merged_config().get(self.framework_name_key)
        if isinstance(value, str):
            return value
        return None


__all__ = ["DescriptorAssembler", "FRAMEWORK_NAME_KEY"]
