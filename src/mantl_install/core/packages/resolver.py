"""Select the concrete version of a package to install."""
from __future__ import annotations

import logging
from typing import Optional

from mantl_install.core.exceptions import NoInstallableVersionError

from .models import Package, PackageVersion

logger = logging.getLogger(__name__)


def resolve_version(package: Package, requested: Optional[str] = "") -> PackageVersion:
    """Resolve ``requested`` against ``package``'s versions.

    A non-empty request matching a version (case-insensitive, trimmed) wins,
    whether or not that version is supported. Anything else falls back to the
    version with the greatest release index across all versions.

    Raises:
        NoInstallableVersionError: if the package declares no versions.
    """
    requested = (requested or "").strip()
    if requested:
        match = package.find_version(requested)
        if match is not None:
            return match
        logger.info("Version %s of %s not found, using latest", requested, package.name)

    latest = package.find_latest_version()
    if latest is None:
        raise NoInstallableVersionError(
            f"Could not find installable version for {package.name}",
            context={"package": package.name, "requested": requested},
        )
    return latest


__all__ = ["resolve_version"]
