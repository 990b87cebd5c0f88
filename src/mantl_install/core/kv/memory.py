from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

import yaml

from mantl_install.core.exceptions import ConfigError, StoreError


def _to_bytes(value: Union[str, bytes, Any]) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    raise TypeError(f"Unsupported value type {type(value).__name__}")


class MemoryStore:
    """In-memory key-value store.

    Keys are plain ``/`` separated strings, as in Consul KV. Individual keys
    can be marked as failing to simulate a store that cannot serve a read.
    """

    def __init__(self, data: Optional[Mapping[str, Union[str, bytes]]] = None) -> None:
        self._data: Dict[str, bytes] = {}
        self._failing: Set[str] = set()
        self._lock = threading.Lock()
        for key, value in (data or {}).items():
            self.put(key, value)

    @classmethod
    def from_file(cls, path: Path) -> "MemoryStore":
        """Seed a store from a YAML (or JSON) mapping of key -> value."""
        path = Path(path)
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(
                f"Could not load store seed file {path}: {exc}",
                context={"path": str(path)},
            ) from exc
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(
                f"Store seed file {path} must contain a mapping",
                context={"path": str(path)},
            )
        # Structured values are stored as their JSON text.
        return cls({str(k): v if isinstance(v, str) else json.dumps(v) for k, v in raw.items()})

    def put(self, key: str, value: Union[str, bytes]) -> None:
        with self._lock:
            self._data[key.strip("/")] = _to_bytes(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key.strip("/"), None)

    def fail(self, *keys: str) -> None:
        """Make reads of ``keys`` raise StoreError."""
        with self._lock:
            self._failing.update(k.strip("/") for k in keys)

    def keys(self) -> Iterable[str]:
        with self._lock:
            return sorted(self._data)

    def get(self, key: str) -> Optional[bytes]:
        k = key.strip("/")
        with self._lock:
            if k in self._failing:
                raise StoreError(f"Could not read {k}: simulated failure", key=k)
            return self._data.get(k)

    def list_child_keys(self, prefix: str) -> List[str]:
        p = prefix.strip("/") + "/"
        with self._lock:
            if p.rstrip("/") in self._failing:
                raise StoreError(f"Could not list {p}: simulated failure", key=p)
            children: Set[str] = set()
            for key in self._data:
                if not key.startswith(p):
                    continue
                rest = key[len(p):]
                head, sep, _ = rest.partition("/")
                children.add(p + head + sep)
            return sorted(children)


__all__ = ["MemoryStore"]
