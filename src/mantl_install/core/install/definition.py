from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from mantl_install.core.exceptions import DocumentParseError, OptionsParseError, TemplateParseError
from mantl_install.core.packages.catalog import OPTIONS_DOCUMENT
from mantl_install.core.utils.merge import deep_merge

from .schema import ConfigSchemaNode, parse_config_schema
from .templating import render_template

logger = logging.getLogger(__name__)

COMMAND_DOCUMENT = "command.json"
CONFIG_DOCUMENT = "config.json"
MARATHON_DOCUMENT = "marathon.json"
PACKAGE_DOCUMENT = "package.json"

# Document file name -> PackageDefinition attribute, in assembly order.
DOCUMENTS: Dict[str, str] = {
    COMMAND_DOCUMENT: "command_json",
    CONFIG_DOCUMENT: "config_json",
    MARATHON_DOCUMENT: "marathon_json",
    PACKAGE_DOCUMENT: "package_json",
    OPTIONS_DOCUMENT: "options_json",
}


def _parse_object(raw: bytes, *, key: str, error: type, what: str) -> Dict[str, Any]:
    if not raw or not raw.strip():
        return {}
    try:
        document = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("Could not unmarshal %s %s: %s", what, key, exc)
        raise error(f"Could not parse {what} {key}", key=key, details=str(exc)) from exc
    if document is None:
        return {}
    if not isinstance(document, dict):
        logger.error("Expected a JSON object in %s %s", what, key)
        raise error(f"{what.capitalize()} {key} is not a JSON object", key=key)
    return document


@dataclass
class PackageDefinition:
    """Descriptor documents of one package version, assembled across layers.

    Each document holds the raw bytes of the highest-priority layer that
    defines it, or ``b""`` when no layer does. ``sources`` records which
    store key each document came from.
    """

    name: str
    version: str
    release: str
    framework: bool = False
    framework_name: str = ""
    command_json: bytes = b""
    config_json: bytes = b""
    marathon_json: bytes = b""
    package_json: bytes = b""
    options_json: bytes = b""
    sources: Dict[str, str] = field(default_factory=dict)

    def source_key(self, document: str) -> str:
        return self.sources.get(document, f"{self.name}/{self.release}/{document}")

    def is_valid(self) -> bool:
        return all(
            len(getattr(self, DOCUMENTS[doc])) > 0
            for doc in (COMMAND_DOCUMENT, CONFIG_DOCUMENT, MARATHON_DOCUMENT, PACKAGE_DOCUMENT)
        )

    def missing_documents(self) -> list:
        return [doc for doc, attr in DOCUMENTS.items() if doc != OPTIONS_DOCUMENT and not getattr(self, attr)]

    def config_schema(self) -> ConfigSchemaNode:
        return parse_config_schema(self.config_json, key=self.source_key(CONFIG_DOCUMENT))

    def options(self) -> Dict[str, Any]:
        """Layer-supplied option overrides; empty when no layer ships any."""
        return _parse_object(
            self.options_json,
            key=self.source_key(OPTIONS_DOCUMENT),
            error=OptionsParseError,
            what="options",
        )

    def command(self) -> Dict[str, Any]:
        return _parse_object(
            self.command_json,
            key=self.source_key(COMMAND_DOCUMENT),
            error=DocumentParseError,
            what="command",
        )

    def package_metadata(self) -> Dict[str, Any]:
        return _parse_object(
            self.package_json,
            key=self.source_key(PACKAGE_DOCUMENT),
            error=DocumentParseError,
            what="package metadata",
        )

    def merged_config(self, overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Schema defaults overlaid with layer options, then with ``overrides``.

        Raises:
            SchemaParseError: malformed configuration schema.
            OptionsParseError: malformed options document.
        """
        config = self.config_schema().default_config()
        config = deep_merge(config, self.options())
        if overrides:
            config = deep_merge(config, overrides)
        return config

    def render_app_json(self, overrides: Optional[Mapping[str, Any]] = None) -> str:
        """Render the deployment template with the merged configuration.

        Raises:
            SchemaParseError, OptionsParseError: see ``merged_config``.
            TemplateParseError: malformed deployment template.
        """
        config = self.merged_config(overrides)
        key = self.source_key(MARATHON_DOCUMENT)
        try:
            text = self.marathon_json.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateParseError(f"Template {key} is not UTF-8 text", key=key, details=str(exc)) from exc
        return render_template(text, config, key=key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "release": self.release,
            "framework": self.framework,
            "frameworkName": self.framework_name,
            "valid": self.is_valid(),
            "sources": dict(self.sources),
        }


__all__ = [
    "PackageDefinition",
    "DOCUMENTS",
    "COMMAND_DOCUMENT",
    "CONFIG_DOCUMENT",
    "MARATHON_DOCUMENT",
    "PACKAGE_DOCUMENT",
    "OPTIONS_DOCUMENT",
]
