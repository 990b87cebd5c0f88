"""Key-value store contract and batched reads.

Every core operation receives an explicit store handle implementing
``KeyValueStore``. Reads that may fail independently (support probes,
descriptor documents) go through ``read_many`` which returns one
``ReadResult`` per key instead of raising.
"""
from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from mantl_install.core.exceptions import StoreError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal read-only view of a hierarchical key-value store."""

    def get(self, key: str) -> Optional[bytes]:
        """Return the raw value stored at ``key`` or None when absent.

        Raises:
            StoreError: when the store cannot answer.
        """
        ...

    def list_child_keys(self, prefix: str) -> List[str]:
        """Return keys directly below ``prefix`` (one level, ``/`` separated).

        Raises:
            StoreError: when the store cannot answer.
        """
        ...


@dataclass(frozen=True)
class ReadResult:
    """Outcome of one read: a value, an absence, or a classified failure."""

    key: str
    value: Optional[bytes] = None
    error: Optional[StoreError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def found(self) -> bool:
        return self.error is None and self.value is not None

    @property
    def data(self) -> bytes:
        """Value bytes, empty when absent or failed."""
        if self.found:
            return self.value or b""
        return b""


def read_key(store: KeyValueStore, key: str) -> ReadResult:
    """Read a single key, capturing store failures in the result."""
    try:
        value = store.get(key)
    except StoreError as exc:
        return ReadResult(key=key, error=exc)
    logger.debug("Read %s (%s)", key, "found" if value is not None else "absent")
    return ReadResult(key=key, value=value)


def read_many(
    store: KeyValueStore,
    keys: Sequence[str],
    *,
    max_workers: int = 1,
) -> Dict[str, ReadResult]:
    """Read ``keys`` and return results in input order.

    With ``max_workers > 1`` reads are issued concurrently; the returned
    mapping is still built in the order of ``keys`` so callers can apply
    results deterministically.
    """
    unique: List[str] = list(dict.fromkeys(keys))
    if max_workers <= 1 or len(unique) <= 1:
        return {key: read_key(store, key) for key in unique}

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(max_workers, len(unique)),
        thread_name_prefix="kv-read",
    ) as executor:
        futures = {key: executor.submit(read_key, store, key) for key in unique}
        return {key: futures[key].result() for key in unique}


__all__ = ["KeyValueStore", "ReadResult", "read_key", "read_many"]
