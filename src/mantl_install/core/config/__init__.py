"""Configuration loading for mantl-install."""

from .install import InstallConfig
from .manager import CONFIG_FILE_ENV, ENV_PREFIX, ConfigManager

__all__ = ["ConfigManager", "InstallConfig", "ENV_PREFIX", "CONFIG_FILE_ENV"]
