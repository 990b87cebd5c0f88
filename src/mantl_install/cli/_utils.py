"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from mantl_install.core.config import InstallConfig
from mantl_install.core.exceptions import MantlInstallError, NotFoundError
from mantl_install.core.install import Installer

from ._output import OutputFormatter

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def get_config_path(args: argparse.Namespace) -> Optional[Path]:
    raw = getattr(args, "config", None)
    return Path(raw) if raw else None


def load_install_config(args: argparse.Namespace) -> InstallConfig:
    """Load configuration honouring the global ``--config`` flag."""
    return InstallConfig.load(get_config_path(args))


def get_installer(args: argparse.Namespace) -> Installer:
    return Installer.from_config(load_install_config(args))


def report_error(formatter: OutputFormatter, exc: MantlInstallError) -> int:
    """Print ``exc`` and map it to an exit code."""
    if isinstance(exc, NotFoundError):
        formatter.error(exc, error_code="not_found")
        return EXIT_NOT_FOUND
    formatter.error(exc, error_code=exc.__class__.__name__)
    return EXIT_ERROR
