"""Consul KV client over the HTTP API.

Only the two read operations the resolution core needs are implemented:

- ``GET /v1/kv/<key>?raw`` for single values (404 means absent)
- ``GET /v1/kv/<prefix>?keys&separator=/`` for one level of child keys

Transient failures are retried with exponential backoff before surfacing
as ``StoreError``.
"""
from __future__ import annotations

import json
import logging
from typing import List, Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from mantl_install.core.exceptions import StoreError
from mantl_install.core.resilience import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "http://127.0.0.1:8500"


class _TransientError(Exception):
    """Internal marker for failures worth retrying."""


class ConsulStore:
    """Read-only Consul KV store."""

    def __init__(
        self,
        address: str = DEFAULT_ADDRESS,
        *,
        token: Optional[str] = None,
        timeout: float = 10.0,
        max_attempts: int = 3,
        initial_delay: float = 0.5,
        backoff_factor: float = 2.0,
    ) -> None:
        self.address = address.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._retry = retry_with_backoff(
            max_attempts=max_attempts,
            initial_delay=initial_delay,
            backoff_factor=backoff_factor,
            exceptions=(_TransientError,),
        )

    def _url(self, key: str, query: str) -> str:
        return f"{self.address}/v1/kv/{quote(key.lstrip('/'), safe='/')}?{query}"

    def _request(self, url: str) -> Tuple[int, bytes]:
        req = Request(url, method="GET")
        if self.token:
            req.add_header("X-Consul-Token", self.token)
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                return resp.status, resp.read()
        except HTTPError as exc:
            if exc.code == 404:
                return 404, b""
            if exc.code >= 500:
                raise _TransientError(f"HTTP {exc.code}") from exc
            return exc.code, b""
        except (URLError, TimeoutError, ConnectionError) as exc:
            raise _TransientError(str(getattr(exc, "reason", exc))) from exc

    def _fetch(self, key: str, query: str) -> Tuple[int, bytes]:
        url = self._url(key, query)
        logger.debug("GET %s", url)
        try:
            return self._retry(self._request)(url)
        except _TransientError as exc:
            raise StoreError(f"Could not read {key}: {exc}", key=key) from exc

    def get(self, key: str) -> Optional[bytes]:
        status, body = self._fetch(key, "raw")
        if status == 404:
            return None
        if status != 200:
            raise StoreError(f"Could not read {key}: HTTP {status}", key=key)
        return body

    def list_child_keys(self, prefix: str) -> List[str]:
        if not prefix.endswith("/"):
            prefix = prefix + "/"
        status, body = self._fetch(prefix, "keys&separator=/")
        if status == 404:
            return []
        if status != 200:
            raise StoreError(f"Could not list {prefix}: HTTP {status}", key=prefix)
        try:
            keys = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreError(f"Could not decode key listing for {prefix}: {exc}", key=prefix) from exc
        if not isinstance(keys, list):
            raise StoreError(f"Unexpected key listing for {prefix}", key=prefix)
        return [str(k) for k in keys]


__all__ = ["ConsulStore", "DEFAULT_ADDRESS"]
