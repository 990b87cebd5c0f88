"""Package configuration schema (``config.json``) and default extraction.

A package schema is a JSON Schema subset. Only what default extraction
needs is modelled; values are never validated against it.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

import jsonschema
from jsonschema.exceptions import best_match

from mantl_install.core.exceptions import SchemaParseError
from mantl_install.data import read_yaml

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class ConfigSchemaNode:
    description: str = ""
    type: str = ""
    additional_properties: bool = False
    properties: Dict[str, "ConfigSchemaNode"] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    minimum: Any = None
    default: Any = _MISSING

    @property
    def has_default(self) -> bool:
        # JSON null counts as "no default".
        return self.default is not _MISSING and self.default is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigSchemaNode":
        additional = data.get("additionalProperties", False)
        return cls(
            description=str(data.get("description") or ""),
            type=str(data.get("type") or ""),
            additional_properties=bool(additional),
            properties={
                name: cls.from_dict(child)
                for name, child in (data.get("properties") or {}).items()
            },
            required=list(data.get("required") or []),
            minimum=data.get("minimum"),
            default=data.get("default", _MISSING),
        )

    def default_config(self) -> Dict[str, Any]:
        """Extract the defaults tree declared by this node's properties.

        A declared ``default`` is taken verbatim (no coercion to ``type``);
        object-typed properties without one contribute their own nested
        defaults, possibly empty; anything else contributes nothing.
        """
        defaults: Dict[str, Any] = {}
        for name, child in self.properties.items():
            if child.has_default:
                defaults[name] = child.default
            elif child.type == "object":
                defaults[name] = child.default_config()
        return defaults


def parse_config_schema(raw: bytes, *, key: str) -> ConfigSchemaNode:
    """Parse a stored ``config.json``. Empty input yields an empty schema.

    Raises:
        SchemaParseError: if the document is not JSON or not a schema object.
    """
    if not raw or not raw.strip():
        return ConfigSchemaNode()
    try:
        document = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("Could not unmarshal configuration schema %s: %s", key, exc)
        raise SchemaParseError(f"Could not parse configuration schema {key}", key=key, details=str(exc)) from exc

    if document is None:
        return ConfigSchemaNode()

    validator = jsonschema.Draft202012Validator(read_yaml("schemas", "package-config.schema.yaml"))
    error = best_match(validator.iter_errors(document))
    if error is not None:
        where = "/".join(str(p) for p in error.absolute_path) or "<root>"
        logger.error("Configuration schema %s is malformed at %s: %s", key, where, error.message)
        raise SchemaParseError(
            f"Configuration schema {key} is malformed at {where}: {error.message}",
            key=key,
            details=error.message,
        )
    return ConfigSchemaNode.from_dict(document)


__all__ = ["ConfigSchemaNode", "parse_config_schema"]
