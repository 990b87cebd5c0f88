"""
mantl-install package show command.

SUMMARY: Show a package and its versions
"""

from __future__ import annotations

import argparse

from mantl_install.cli import (
    OutputFormatter,
    add_json_flag,
    add_package_name_arg,
    get_installer,
    report_error,
)
from mantl_install.core.exceptions import MantlInstallError, PackageNotFoundError

SUMMARY = "Show a package and its versions"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_package_name_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        pkg = get_installer(args).package(args.name)
        if pkg is None:
            raise PackageNotFoundError(f"Package {args.name} not found", context={"package": args.name})

        if formatter.json_mode:
            formatter.json_output(pkg.to_dict())
            return 0

        formatter.text(pkg.name)
        formatter.text_kv("description", pkg.description)
        formatter.text_kv("framework", pkg.framework)
        formatter.text_kv("supported", pkg.supported)
        formatter.text_kv("current version", pkg.current_version or "-")
        if pkg.tags:
            formatter.text_kv("tags", ", ".join(pkg.tags))
        formatter.text("  versions:")
        for pv in sorted(pkg.package_versions(), key=lambda v: v.index, reverse=True):
            flag = " (supported)" if pv.supported else ""
            formatter.text(f"    {pv.version} [release {pv.index}]{flag}")
        return 0
    except MantlInstallError as exc:
        return report_error(formatter, exc)
