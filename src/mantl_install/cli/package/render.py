"""
mantl-install package render command.

SUMMARY: Render a package's merged configuration and deployment descriptor

The package is resolved across repository layers, its configuration
defaults are merged with layer options and any request overrides, and the
marathon template is rendered with the result.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from mantl_install.cli import (
    OutputFormatter,
    add_json_flag,
    add_package_name_arg,
    add_version_arg,
    format_json,
    get_installer,
    report_error,
)
from mantl_install.core.exceptions import MantlInstallError, RequestParseError
from mantl_install.core.install import PackageRequest

SUMMARY = "Render a package's merged configuration and deployment descriptor"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_package_name_arg(parser)
    add_version_arg(parser)
    parser.add_argument(
        "--request",
        metavar="FILE",
        help="JSON install request whose config is applied as overrides",
    )
    parser.add_argument(
        "--config-only",
        action="store_true",
        help="Print only the merged configuration",
    )
    add_json_flag(parser)


def _build_request(args: argparse.Namespace) -> PackageRequest:
    if not args.request:
        return PackageRequest(name=args.name, version=args.package_version)

    path = Path(args.request)
    try:
        body = path.read_bytes()
    except OSError as exc:
        raise RequestParseError(f"Could not read request {path}: {exc}", key=str(path)) from exc
    request = PackageRequest.from_json(body, key=str(path))
    # Command-line name and version take precedence over the request body.
    request.name = args.name
    if args.package_version:
        request.version = args.package_version
    return request


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        request = _build_request(args)
        installer = get_installer(args)

        if args.config_only:
            definition = installer.package_definition(request.name, request.version)
            config = definition.merged_config(request.config)
            if formatter.json_mode:
                formatter.json_output({**definition.to_dict(), "config": config})
            else:
                formatter.text(format_json(config))
            return 0

        rendered = installer.render(request)
        if formatter.json_mode:
            formatter.json_output(rendered.to_dict())
        else:
            formatter.text(rendered.app_json.rstrip("\n"))
        return 0
    except MantlInstallError as exc:
        return report_error(formatter, exc)
