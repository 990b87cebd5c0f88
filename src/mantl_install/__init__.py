"""
mantl-install - layered package resolution for Mantl

Resolves packages from layered repositories stored in Consul KV and renders
their deployment descriptors from merged configuration.
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
