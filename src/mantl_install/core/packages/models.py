from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class PackageVersion:
    """One version of a package.

    ``index`` is the release index: an opaque token compared as a string
    to order releases by recency.
    """

    version: str
    index: str
    supported: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "index": self.index, "supported": self.supported}


def _most_recent_first(versions: List[PackageVersion]) -> List[PackageVersion]:
    # Stable: equal release indexes keep their incoming order.
    return sorted(versions, key=lambda pv: pv.index, reverse=True)


@dataclass
class Package:
    name: str
    description: str = ""
    framework: bool = False
    current_version: str = ""
    supported: bool = False
    tags: List[str] = field(default_factory=list)
    versions: Dict[str, PackageVersion] = field(default_factory=dict)

    @property
    def container_id(self) -> str:
        """Uppercased first character of the name (top-level storage bucket)."""
        return self.name[:1].upper()

    @property
    def package_key(self) -> str:
        return posixpath.join(self.container_id, self.name)

    def version_key(self, index: str) -> str:
        return posixpath.join(self.package_key, index)

    def package_versions(self) -> List[PackageVersion]:
        return list(self.versions.values())

    def supported_versions(self) -> List[PackageVersion]:
        return [pv for pv in self.package_versions() if pv.supported]

    def has_supported_version(self) -> bool:
        return any(pv.supported for pv in self.package_versions())

    def find_version(self, version: str) -> Optional[PackageVersion]:
        """Case-insensitive, whitespace-trimmed exact match on version strings."""
        wanted = (version or "").strip().casefold()
        for pv in self.package_versions():
            if pv.version.casefold() == wanted:
                return pv
        return None

    def find_latest_version(self) -> Optional[PackageVersion]:
        """Version with the greatest release index, supported or not."""
        ordered = _most_recent_first(self.package_versions())
        return ordered[0] if ordered else None

    def latest_supported_version(self) -> Optional[PackageVersion]:
        ordered = _most_recent_first(self.supported_versions())
        return ordered[0] if ordered else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "framework": self.framework,
            "currentVersion": self.current_version,
            "supported": self.supported,
            "tags": list(self.tags),
            "versions": {v: pv.to_dict() for v, pv in self.versions.items()},
        }


@dataclass(frozen=True)
class PackageIndexEntry:
    """One package as declared by the base repository's ``index.json``."""

    name: str
    description: str = ""
    framework: bool = False
    current_version: str = ""
    tags: tuple = ()
    versions: tuple = ()  # ((version, release index), ...) in index order

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackageIndexEntry":
        """Build an entry from its JSON form.

        Raises:
            ValueError: if the entry is not an object or has no usable name.
        """
        if not isinstance(data, Mapping):
            raise ValueError("index entry is not an object")
        # Field names match case-insensitively (currentVersion, CurrentVersion, ...).
        data = {str(k).lower(): v for k, v in data.items()}
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("index entry has no name")

        versions = data.get("versions") or {}
        if not isinstance(versions, Mapping):
            raise ValueError(f"versions of '{name}' is not an object")
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ValueError(f"tags of '{name}' is not a list")
        framework = data.get("framework")
        if framework is None:
            framework = False
        if not isinstance(framework, bool):
            raise ValueError(f"framework of '{name}' is not a boolean")

        return cls(
            name=name,
            description=str(data.get("description") or ""),
            framework=framework,
            current_version=str(data.get("currentversion") or ""),
            tags=tuple(str(t) for t in tags),
            versions=tuple((str(v), str(idx)) for v, idx in versions.items()),
        )

    def to_package(self) -> Package:
        return Package(
            name=self.name,
            description=self.description,
            framework=self.framework,
            current_version=self.current_version,
            tags=list(self.tags),
            versions={
                version: PackageVersion(version=version, index=index, supported=False)
                for version, index in self.versions
            },
        )


__all__ = ["PackageVersion", "Package", "PackageIndexEntry"]
