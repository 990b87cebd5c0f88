from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from mantl_install.core.exceptions import RequestParseError


@dataclass
class PackageRequest:
    """A request to install (or uninstall) one package.

    ``config`` holds user overrides applied on top of the package's merged
    configuration.
    """

    name: str
    version: str = ""
    config: Dict[str, Any] = field(default_factory=dict)
    uninstall_options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Union[str, bytes], *, key: str = "<request>") -> "PackageRequest":
        """Parse a JSON request body.

        Example:
            >>> PackageRequest.from_json('{"name": "zookeeper", "config": {"instances": 5}}')
            PackageRequest(name='zookeeper', version='', config={'instances': 5}, uninstall_options={})
        """
        try:
            body = json.loads(data)
        except (TypeError, ValueError) as exc:
            raise RequestParseError(f"Could not parse package request {key}", key=key, details=str(exc)) from exc
        if not isinstance(body, dict):
            raise RequestParseError(f"Package request {key} is not a JSON object", key=key)

        name = body.get("name")
        if not isinstance(name, str) or not name.strip():
            raise RequestParseError(f"Package request {key} has no package name", key=key)

        config = body.get("config") or {}
        uninstall = body.get("uninstallOptions") or {}
        if not isinstance(config, dict) or not isinstance(uninstall, dict):
            raise RequestParseError(
                f"Package request {key}: config and uninstallOptions must be objects",
                key=key,
            )

        return cls(
            name=name.strip(),
            version=str(body.get("version") or "").strip(),
            config=config,
            uninstall_options=uninstall,
        )


__all__ = ["PackageRequest"]
