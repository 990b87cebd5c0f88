"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_package_name_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Package name (case-insensitive)")


def add_version_arg(parser: argparse.ArgumentParser) -> None:
    # Stored as package_version; the top-level --version prints the tool version.
    parser.add_argument(
        "--version",
        dest="package_version",
        default="",
        metavar="VERSION",
        help="Package version (default: latest release)",
    )
