"""Packages, their versions, and the catalog that resolves them."""

from .catalog import OPTIONS_DOCUMENT, LayerProbeWarning, PackageCatalog
from .models import Package, PackageIndexEntry, PackageVersion
from .resolver import resolve_version

__all__ = [
    "Package",
    "PackageIndexEntry",
    "PackageVersion",
    "PackageCatalog",
    "LayerProbeWarning",
    "OPTIONS_DOCUMENT",
    "resolve_version",
]
