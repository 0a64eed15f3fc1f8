"""
Configuration management for saferc.

This module handles the ~/.saferc target store: target records and lookup,
migration from the old file layout, and persistence of the config and
session files.
"""

from saferc.config.legacy import LegacyConfig
from saferc.config.paths import RcPaths, default_paths, user_home_dir
from saferc.config.store import load_config, save_config, session_document
from saferc.config.targets import CONFIG_VERSION, Config, Vault

__all__ = [
    # Targets
    "Config",
    "Vault",
    "CONFIG_VERSION",
    # Legacy format
    "LegacyConfig",
    # Paths
    "RcPaths",
    "default_paths",
    "user_home_dir",
    # Persistence
    "load_config",
    "save_config",
    "session_document",
]
