"""
Projecting the active target into environment variables.

Vault clients read their address and token from VAULT_ADDR and
VAULT_TOKEN. apply_session() exports the chosen target into an
environment mapping so the current process, or a child started with that
mapping, talks to the right Vault.

When no target is selected and VAULT_TOKEN is not already set, the token
that `vault login` leaves in ~/.vault-token is used instead.
"""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping

from saferc.config.paths import RcPaths, default_paths
from saferc.config.store import load_config
from saferc.config.targets import Config
from saferc.exceptions import SessionError, TargetError

logger = logging.getLogger(__name__)

ADDR_ENV = "VAULT_ADDR"
TOKEN_ENV = "VAULT_TOKEN"
SKIP_VERIFY_ENV = "VAULT_SKIP_VERIFY"


def apply_session(
    config: Config,
    which: str = "",
    environ: MutableMapping[str, str] | None = None,
    paths: RcPaths | None = None,
) -> dict[str, str]:
    """
    Export a target's address and token into an environment.

    Args:
        config: Loaded saferc document.
        which: Alias or URL to apply. Empty means the current target.
        environ: Mapping to update. Defaults to os.environ.
        paths: File locations, used for the fallback token file.

    Returns:
        The entries that were set.

    Raises:
        SessionError: If which is ambiguous or does not match a target.
    """
    if environ is None:
        environ = os.environ
    if paths is None:
        paths = default_paths()

    try:
        vault = config.resolve(which)
    except TargetError as e:
        raise SessionError(str(e)) from e

    exported: dict[str, str] = {}
    if vault is not None:
        exported[ADDR_ENV] = vault.url
        exported[TOKEN_ENV] = vault.token
        if vault.skip_verify:
            exported[SKIP_VERIFY_ENV] = "1"
    elif not environ.get(TOKEN_ENV):
        token = _read_token_file(paths)
        if token is not None:
            exported[TOKEN_ENV] = token

    environ.update(exported)
    return exported


def load_and_apply(
    which: str = "",
    environ: MutableMapping[str, str] | None = None,
    paths: RcPaths | None = None,
) -> Config:
    """
    Load ~/.saferc and apply a target to the environment.

    Raises:
        LegacyConfigError: If the config file is in the old format but
                           malformed.
        SessionError: If the target cannot be resolved.
    """
    if paths is None:
        paths = default_paths()
    config = load_config(paths)
    apply_session(config, which, environ, paths)
    return config


def _read_token_file(paths: RcPaths) -> str | None:
    try:
        token = paths.token_file.read_bytes().decode("utf-8", errors="replace").strip()
    except OSError:
        return None
    logger.debug("Using token from %s", paths.token_file)
    return token
