"""Key-value store access for repository data.

Stores implement ``KeyValueStore`` (``get`` and ``list_child_keys``);
``open_store`` builds the configured backend.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from .base import KeyValueStore, ReadResult, read_key, read_many
from .consul import ConsulStore
from .memory import MemoryStore

if TYPE_CHECKING:
    from mantl_install.core.config import InstallConfig


def open_store(config: "InstallConfig") -> KeyValueStore:
    """Build the store backend selected by ``store.backend``."""
    if config.store_backend == "memory":
        if config.store_seed_file is not None:
            return MemoryStore.from_file(config.store_seed_file)
        return MemoryStore()

    retry = config.retry
    return ConsulStore(
        config.store_address,
        token=config.store_token,
        timeout=config.store_timeout,
        max_attempts=int(retry.get("max_attempts", 3)),
        initial_delay=float(retry.get("initial_delay", 0.5)),
        backoff_factor=float(retry.get("backoff_factor", 2.0)),
    )


__all__ = [
    "KeyValueStore",
    "ReadResult",
    "read_key",
    "read_many",
    "ConsulStore",
    "MemoryStore",
    "open_store",
]
