"""Canonical deep merge utilities.

Single source of truth for configuration merging: schema defaults are
overlaid with layer options and then with user-supplied request config,
always through ``deep_merge``.

Semantics:
- Nested mappings present on both sides merge key by key
- Anything else (scalars, lists, a mapping meeting a non-mapping) is
  replaced by the override value
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


def deep_merge(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Recursively merge mappings without mutating inputs.

    Args:
        base: Base mapping (lower priority)
        override: Override mapping (higher priority)

    Returns:
        New merged dictionary

    Example:
        >>> base = {"a": 1, "b": {"c": 2}}
        >>> override = {"b": {"d": 3}}
        >>> deep_merge(base, override)
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        existing = result.get(key)
        if key in result and isinstance(existing, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(existing, value)
        else:
            result[key] = value
    return result


__all__ = ["deep_merge"]
