"""
Migration from the old single-target ~/.saferc layout.

Old versions of the file had no version key and looked like:

    Current: https://vault.example.com
    Targets:
      https://vault.example.com: s.token
    Aliases:
      prod: https://vault.example.com
    SkipVerify:
      https://vault.example.com: true

Tokens and TLS settings were keyed by URL rather than by alias. The file
is only ever read in this shape; the next save writes the new layout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from saferc.config.targets import CONFIG_VERSION, Config, Vault, as_string
from saferc.exceptions import LegacyConfigError

logger = logging.getLogger(__name__)


@dataclass
class LegacyConfig:
    """Decoded old-format document."""

    current: str = ""
    # URL -> token; values are whatever old writers stored
    targets: dict[str, Any] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    skip_verify: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LegacyConfig:
        """
        Decode an old-format mapping.

        Raises:
            LegacyConfigError: If any key has the wrong type.
        """
        try:
            current = as_string(data.get("Current"), "Current")
            aliases = {
                str(alias): as_string(url, f"Aliases: URL for '{alias}'")
                for alias, url in _mapping(data, "Aliases").items()
            }
        except ValueError as e:
            raise LegacyConfigError(str(e)) from e

        targets = _mapping(data, "Targets")
        skip_verify = _mapping(data, "SkipVerify")

        for url, skip in skip_verify.items():
            if not isinstance(skip, bool):
                raise LegacyConfigError(
                    f"SkipVerify: value for '{url}' must be a boolean, not {skip!r}"
                )

        return cls(
            current=current,
            targets={str(k): v for k, v in targets.items()},
            aliases=aliases,
            skip_verify={str(k): v for k, v in skip_verify.items()},
        )

    def convert(self) -> Config:
        """
        Build a new-format Config with one target per alias.

        Tokens that are not strings are dropped with a warning; the target
        is still created with an empty token.
        """
        config = Config(version=CONFIG_VERSION, current=self.current)

        for alias, url in self.aliases.items():
            vault = Vault(url=url, skip_verify=self.skip_verify.get(url, False))

            token = self.targets.get(url)
            if isinstance(token, str):
                vault.token = token
            elif token is not None:
                logger.warning(
                    "Ignoring non-string token for %s in old config format", url
                )

            config.vaults[alias] = vault

        logger.info("Migrated %d target(s) from old config format", len(config.vaults))
        return config


def _mapping(data: dict[str, Any], key: str) -> dict[Any, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise LegacyConfigError(f"{key} must be a mapping")
    return value
