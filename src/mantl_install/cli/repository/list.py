"""
mantl-install repository list command.

SUMMARY: List the repository layers found in the store
"""

from __future__ import annotations

import argparse

from mantl_install.cli import OutputFormatter, add_json_flag, get_installer, report_error
from mantl_install.core.exceptions import MantlInstallError

SUMMARY = "List the repository layers found in the store"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        layers = get_installer(args).layers()
        if formatter.json_mode:
            formatter.json_output({"layers": [layer.to_dict() for layer in layers]})
            return 0

        if not len(layers):
            formatter.text("No repository layers found.")
            return 0
        for layer in layers:
            role = "base" if layer.is_base else "override"
            formatter.text(f"{layer.index:>3}  {layer.name}  ({role})")
        return 0
    except MantlInstallError as exc:
        return report_error(formatter, exc)
