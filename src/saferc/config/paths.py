"""
Home directory and file locations for saferc.

All three files live directly under the user's home directory:

    ~/.saferc       - primary config (all targets, current alias)
    ~/.svtoken      - session file for the current target only
    ~/.vault-token  - plaintext token left by other Vault tooling

The home directory is read from an environment mapping rather than
Path.home() so the Windows and POSIX rules can be exercised anywhere.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = ".saferc"
SESSION_FILENAME = ".svtoken"
TOKEN_FILENAME = ".vault-token"

# Overrides platform home resolution when set
HOME_OVERRIDE_ENV = "SAFERC_HOME"

logger = logging.getLogger(__name__)


def user_home_dir(
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> str:
    """
    Resolve the user's home directory from the environment.

    Args:
        environ: Environment mapping. Defaults to os.environ.
        platform: Platform string as in sys.platform. Defaults to the
                  running platform.

    Returns:
        Home directory path, or an empty string if none is set.
    """
    if environ is None:
        environ = os.environ
    if platform is None:
        platform = sys.platform

    if platform.startswith("win"):
        home = environ.get("USERPROFILE", "")
        if not home:
            home = environ.get("HOMEDRIVE", "") + environ.get("HOMEPATH", "")
        return home
    return environ.get("HOME", "")


@dataclass(frozen=True)
class RcPaths:
    """Locations of the files saferc reads and writes."""

    home: Path

    @property
    def config_file(self) -> Path:
        return self.home / CONFIG_FILENAME

    @property
    def session_file(self) -> Path:
        return self.home / SESSION_FILENAME

    @property
    def token_file(self) -> Path:
        return self.home / TOKEN_FILENAME

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        platform: str | None = None,
    ) -> RcPaths:
        """
        Build paths from the environment.

        SAFERC_HOME takes precedence over the platform home variables.
        """
        if environ is None:
            environ = os.environ
        override = environ.get(HOME_OVERRIDE_ENV)
        if override:
            return cls(Path(override))
        home = user_home_dir(environ, platform)
        if not home:
            logger.warning(
                "No home directory set in the environment; using the current "
                "directory for %s and %s",
                CONFIG_FILENAME,
                SESSION_FILENAME,
            )
        return cls(Path(home))


def default_paths(home: str | Path | None = None) -> RcPaths:
    """Return paths rooted at home, or resolved from the environment."""
    if home is not None:
        return RcPaths(Path(home))
    return RcPaths.from_environment()
