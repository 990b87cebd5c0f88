"""
mantl-install config show command.

SUMMARY: Show effective configuration

Displays the merged configuration from bundled defaults, the user config
file and environment variables.
"""

from __future__ import annotations

import argparse

import yaml

from mantl_install.cli import OutputFormatter, add_json_flag, load_install_config, report_error
from mantl_install.core.exceptions import MantlInstallError

SUMMARY = "Show effective configuration"


def _lookup(config: dict, dotkey: str):
    cur = config
    for part in dotkey.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None, False
        cur = cur[part]
    return cur, True


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'store.address')",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Show configuration as YAML (or JSON with --json)."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = load_install_config(args).as_dict()
    except MantlInstallError as exc:
        return report_error(formatter, exc)

    data = config
    if args.key:
        value, found = _lookup(config, args.key)
        if not found:
            formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="not_found")
            return 1
        data = {args.key: value}

    if formatter.json_mode:
        formatter.json_output(data)
    else:
        formatter.text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True).rstrip()
        )
    return 0
