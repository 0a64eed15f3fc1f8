"""
Target records and the resolver that selects among them.

A Config holds any number of named Vault targets and the alias of the one
currently in use. Lookups accept either an alias or a Vault URL:

    config = Config()
    config.set_target("prod", "https://vault.example.com:8200/", False)
    config.find("prod")                            # by alias
    config.find("https://vault.example.com:8200")  # by URL, slash ignored

URL lookups fail with AmbiguousTargetError when more than one alias points
at the same Vault, since there is no way to tell which credentials to use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from saferc.exceptions import (
    AmbiguousTargetError,
    NoTargetSelectedError,
    TargetNotFoundError,
)

logger = logging.getLogger(__name__)

CONFIG_VERSION = 1


@dataclass
class Vault:
    """A single Vault endpoint and the credentials used against it."""

    url: str
    token: str = ""
    skip_verify: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk mapping."""
        return {
            "url": self.url,
            "token": self.token,
            "skip_verify": self.skip_verify,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Vault:
        """
        Create a Vault from its on-disk mapping.

        Raises:
            ValueError: If a field has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"target must be a mapping, not {type(data).__name__}")
        url = as_string(data.get("url"), "target url")
        token = as_string(data.get("token"), "target token")
        skip_verify = data.get("skip_verify") or False
        if not isinstance(skip_verify, bool):
            raise ValueError("target skip_verify must be a boolean")
        return cls(url=url, token=token, skip_verify=skip_verify)


@dataclass
class Config:
    """
    The saferc document: every known target plus the current selection.

    Attributes:
        version: Format version. Zero means the document is in the old
                 single-target layout and must be migrated.
        current: Alias (or URL) of the current target. Empty when no
                 target is selected.
        vaults: Targets keyed by alias.
    """

    version: int = CONFIG_VERSION
    current: str = ""
    vaults: dict[str, Vault] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the mapping written to ~/.saferc."""
        return {
            "version": self.version,
            "current": self.current,
            "vaults": {alias: v.to_dict() for alias, v in self.vaults.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """
        Create a Config from a parsed ~/.saferc mapping.

        A missing version decodes as 0 so the caller can detect the old
        format.

        Raises:
            ValueError: If the mapping does not have the expected shape.
        """
        version = data.get("version") or 0
        current = as_string(data.get("current"), "current")
        vaults = data.get("vaults") or {}
        if isinstance(version, bool) or not isinstance(version, int):
            raise ValueError(f"version must be an integer, not {version!r}")
        if not isinstance(vaults, dict):
            raise ValueError("vaults must be a mapping")
        return cls(
            version=version,
            current=current,
            vaults={str(alias): Vault.from_dict(v) for alias, v in vaults.items()},
        )

    def aliases(self) -> list[str]:
        """Return all target aliases in sorted order."""
        return sorted(self.vaults)

    def find(self, alias: str) -> Vault | None:
        """
        Find a target by alias, falling back to its URL.

        An exact alias match always wins. Otherwise every target whose URL
        matches (ignoring a single trailing slash on either side) is a
        candidate.

        Args:
            alias: Target alias or Vault URL.

        Returns:
            The matching Vault, or None if nothing matches.

        Raises:
            AmbiguousTargetError: If more than one target has this URL.
        """
        if alias in self.vaults:
            return self.vaults[alias]

        want = _strip_slash(alias)
        matches = [v for v in self.vaults.values() if _strip_slash(v.url) == want]

        if len(matches) > 1:
            raise AmbiguousTargetError(alias)
        if matches:
            return matches[0]
        return None

    def resolve(self, which: str = "") -> Vault | None:
        """
        Resolve a target, defaulting to the current one.

        Args:
            which: Alias or URL. Empty means the current target.

        Returns:
            The Vault, or None when which is empty and no target is
            selected. That is a valid state, not an error.

        Raises:
            AmbiguousTargetError: If which matches several targets by URL.
            TargetNotFoundError: If which does not match any target.
        """
        if not which:
            which = self.current
        if not which:
            return None

        vault = self.find(which)
        if vault is None:
            raise TargetNotFoundError(
                which, f"Current target '{which}' not found in ~/.saferc"
            )
        return vault

    def set_current(self, alias: str, skip_verify: bool = False) -> None:
        """
        Make an existing target current.

        Args:
            alias: Alias or URL of the target.
            skip_verify: Force TLS verification off for this target.

        Raises:
            AmbiguousTargetError: If alias matches several targets by URL.
            TargetNotFoundError: If alias does not match any target.
        """
        vault = self.find(alias)
        if vault is None:
            raise TargetNotFoundError(alias)
        self.current = alias
        if skip_verify:
            vault.skip_verify = True
        logger.debug("Current target set to %s", alias)

    def set_target(self, alias: str, url: str, skip_verify: bool = False) -> None:
        """Create or replace the target at alias and make it current."""
        self.current = alias
        self.vaults[alias] = Vault(url=url, skip_verify=skip_verify)
        logger.debug("Target %s now points at %s", alias, url)

    def set_token(self, token: str) -> None:
        """
        Store a token on the current target.

        Raises:
            NoTargetSelectedError: If no target is current.
            TargetNotFoundError: If the current alias no longer resolves.
            AmbiguousTargetError: If the current alias is an ambiguous URL.
        """
        if not self.current:
            raise NoTargetSelectedError()
        vault = self.find(self.current)
        if vault is None:
            raise TargetNotFoundError(self.current)
        vault.token = token

    def url(self) -> str:
        """Return the current target's URL, or an empty string."""
        vault = self._current_or_none()
        return vault.url if vault else ""

    def verified(self) -> bool:
        """Return True if the current target verifies TLS certificates."""
        vault = self._current_or_none()
        return vault is not None and not vault.skip_verify

    def _current_or_none(self) -> Vault | None:
        if not self.current:
            return None
        try:
            return self.find(self.current)
        except AmbiguousTargetError:
            return None


def as_string(value: Any, name: str) -> str:
    """
    Decode a YAML scalar into a string field.

    Unquoted values such as `token: 12345` parse as numbers or booleans;
    they are kept as their text. Null decodes as an empty string.

    Raises:
        ValueError: If the value is a mapping or list.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"{name} must be a string, not {type(value).__name__}")


def _strip_slash(url: str) -> str:
    return url[:-1] if url.endswith("/") else url
