"""
mantl-install package list command.

SUMMARY: List packages with support status and current version

Support probes that fail are reported as warnings; they never abort the
listing.
"""

from __future__ import annotations

import argparse

from mantl_install.cli import OutputFormatter, add_json_flag, get_installer, report_error
from mantl_install.core.exceptions import MantlInstallError

SUMMARY = "List packages with support status and current version"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--supported-only",
        action="store_true",
        help="Only show packages with at least one supported version",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        catalog = get_installer(args).catalog()
        packages = catalog.list()
        if args.supported_only:
            packages = [pkg for pkg in packages if pkg.supported]

        if formatter.json_mode:
            formatter.json_output({
                "packages": [pkg.to_dict() for pkg in packages],
                "warnings": [w.to_dict() for w in catalog.warnings],
            })
            return 0

        for warning in catalog.warnings:
            formatter.warn(f"{warning.layer}: could not read {warning.key}: {warning.error}")
        if not packages:
            formatter.text("No packages found.")
            return 0
        for pkg in packages:
            marker = "*" if pkg.supported else " "
            formatter.text(f"{marker} {pkg.name:<24} {pkg.current_version:<12} {pkg.description}")
        return 0
    except MantlInstallError as exc:
        return report_error(formatter, exc)
