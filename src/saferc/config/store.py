"""
Reading and writing ~/.saferc and its companion session file.

The session file (~/.svtoken) holds only the current target's address,
token and TLS setting for other tools to pick up. It is rewritten every
time the config is saved and removed when no target is selected.

Both files are written owner-only (0600) via a temporary file and an
atomic replace, so a crash never leaves a truncated config behind.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from saferc.config.legacy import LegacyConfig
from saferc.config.paths import RcPaths, default_paths
from saferc.config.targets import Config, Vault
from saferc.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def load_config(paths: RcPaths | None = None) -> Config:
    """
    Load the saferc document.

    A missing or unparsable file yields an empty default document. A file
    without a version is treated as the old format and migrated in memory.

    Args:
        paths: File locations. Defaults to the user's home directory.

    Returns:
        Config instance.

    Raises:
        LegacyConfigError: If the file is in the old format but malformed.
    """
    if paths is None:
        paths = default_paths()

    try:
        raw = paths.config_file.read_bytes()
    except OSError as e:
        logger.debug("Cannot read %s, using defaults: %s", paths.config_file, e)
        return Config()

    try:
        data = yaml.safe_load(raw) or {}
        if not isinstance(data, dict):
            raise ValueError("document is not a mapping")
        config = Config.from_dict(data)
    except (yaml.YAMLError, ValueError) as e:
        logger.debug("Cannot parse %s, using defaults: %s", paths.config_file, e)
        return Config()

    if config.version == 0:
        logger.info("Converting %s from the old config format", paths.config_file)
        config = LegacyConfig.from_dict(data).convert()

    return config


def save_config(config: Config, paths: RcPaths | None = None) -> None:
    """
    Write the saferc document and refresh the session file.

    Args:
        config: Document to save.
        paths: File locations. Defaults to the user's home directory.

    Raises:
        ConfigurationError: If either file cannot be written.
        TargetError: If the current target does not resolve. The config
                     file has already been written at that point.
    """
    if paths is None:
        paths = default_paths()

    _write_secure_file(paths.config_file, _dump(config.to_dict()))

    vault = config.resolve("")
    if vault is None:
        _remove_session(paths.session_file)
        return

    _write_secure_file(paths.session_file, _dump(session_document(vault)))


def session_document(vault: Vault) -> dict[str, Any]:
    """Project a target into the session file mapping."""
    # Keyed "vault" rather than "url"; consumers of ~/.svtoken expect it
    return {
        "vault": vault.url,
        "token": vault.token,
        "skip_verify": vault.skip_verify,
    }


def _dump(data: dict[str, Any]) -> bytes:
    try:
        text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot encode configuration: {e}") from e
    return text.encode()


def _remove_session(path: Path) -> None:
    try:
        path.unlink()
        logger.debug("Removed %s", path)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise ConfigurationError(f"Cannot remove session file: {e}") from e


def _write_secure_file(path: Path, data: bytes) -> None:
    """
    Write data to file with owner-only permissions.

    Writes to a temporary file next to the target and renames it into
    place.
    """
    temp_path = path.with_name(path.name + ".tmp")

    try:
        # Stale temp files keep their old mode, so start from a fresh one
        temp_path.unlink(missing_ok=True)
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(data)

        try:
            os.chmod(temp_path, 0o600)
        except OSError:
            # Windows
            pass

        temp_path.replace(path)
    except OSError as e:
        if temp_path.exists():
            temp_path.unlink()
        raise ConfigurationError(f"Cannot write {path}: {e}") from e

    logger.debug("Wrote %s", path)
