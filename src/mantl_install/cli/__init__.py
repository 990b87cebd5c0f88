"""
mantl-install CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (package/, repository/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Config loading, installer construction and error reporting
"""
from ._args import add_json_flag, add_package_name_arg, add_version_arg
from ._output import OutputFormatter, format_json
from ._utils import (
    EXIT_ERROR,
    EXIT_NOT_FOUND,
    EXIT_OK,
    get_installer,
    load_install_config,
    report_error,
)

__all__ = [
    "OutputFormatter",
    "format_json",
    "add_json_flag",
    "add_package_name_arg",
    "add_version_arg",
    "get_installer",
    "load_install_config",
    "report_error",
    "EXIT_OK",
    "EXIT_NOT_FOUND",
    "EXIT_ERROR",
]
