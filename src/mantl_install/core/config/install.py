"""Typed accessors over the merged mantl-install configuration."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .manager import ConfigManager


class InstallConfig:
    """Section-aware view of the loaded configuration.

    Usage:
        cfg = InstallConfig.load(Path("mantl-install.yaml"))
        print(cfg.store_address)
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config

    @classmethod
    def load(cls, config_path: Optional[Path] = None, **kwargs: Any) -> "InstallConfig":
        return cls(ConfigManager(config_path, **kwargs).load_config(validate=True))

    def as_dict(self) -> Dict[str, Any]:
        return self._config

    def section(self, name: str) -> Dict[str, Any]:
        return self._config.get(name, {}) or {}

    @cached_property
    def store_backend(self) -> str:
        return str(self.section("store").get("backend", "consul"))

    @cached_property
    def store_address(self) -> str:
        return str(self.section("store").get("address", "http://127.0.0.1:8500"))

    @cached_property
    def store_token(self) -> Optional[str]:
        token = self.section("store").get("token")
        return str(token) if token else None

    @cached_property
    def store_timeout(self) -> float:
        return float(self.section("store").get("timeout_seconds", 10))

    @cached_property
    def store_seed_file(self) -> Optional[Path]:
        seed = self.section("store").get("seed_file")
        return Path(seed).expanduser() if seed else None

    @cached_property
    def retry(self) -> Dict[str, Any]:
        return self.section("store").get("retry", {}) or {}

    @cached_property
    def repository_root(self) -> str:
        return str(self.section("repository").get("root", "mantl-install/repository")).strip("/")

    @cached_property
    def max_workers(self) -> int:
        return int(self.section("resolution").get("max_workers", 1))

    @cached_property
    def framework_name_key(self) -> str:
        return str(self.section("resolution").get("framework_name_key", "framework-name"))

    @cached_property
    def log_level(self) -> str:
        return str(self.section("logging").get("level", "WARNING"))

    @cached_property
    def log_file(self) -> Optional[Path]:
        path = self.section("logging").get("file")
        return Path(path).expanduser() if path else None


__all__ = ["InstallConfig"]
