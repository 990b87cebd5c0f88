"""Repository layers for mantl-install.

Repositories live in the key-value store under ``<root>/<index>/``. The
layer with index 0 is the base: it owns the package index. Layers with a
higher index override per-version descriptor documents of lower ones.
"""

from .layers import REPOSITORY_ROOT, RepositoryLayer, RepositoryLayerSet, discover_layers

__all__ = ["REPOSITORY_ROOT", "RepositoryLayer", "RepositoryLayerSet", "discover_layers"]
