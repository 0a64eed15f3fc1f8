"""
Exception hierarchy for saferc.

Errors fall into three groups:
    - TargetError: a lookup against the stored targets failed (unknown
      alias, ambiguous URL, no target selected).
    - ConfigurationError: the config or session file could not be written.
    - FatalError: the process cannot safely continue (corrupt legacy
      config, unresolvable session at startup). The library never exits on
      its own; the CLI maps these to a non-zero exit status.
"""


class SafercError(Exception):
    """Base exception for all saferc errors."""

    pass


class TargetError(SafercError):
    """Base exception for target lookup errors."""

    pass


class AmbiguousTargetError(TargetError):
    """Raised when more than one target matches a URL."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(
            f"More than one target for Vault at '{target}' (maybe try an alias?)"
        )


class TargetNotFoundError(TargetError):
    """Raised when an alias or URL does not match any stored target."""

    def __init__(self, target: str, message: str | None = None) -> None:
        self.target = target
        super().__init__(message or f"Unknown target '{target}'")


class NoTargetSelectedError(TargetError):
    """Raised when an operation needs a current target and none is set."""

    def __init__(self) -> None:
        super().__init__("No target selected")


class ConfigurationError(SafercError):
    """Raised when configuration cannot be encoded or written."""

    pass


class FatalError(SafercError):
    """Raised when the process should report the error and terminate."""

    pass


class LegacyConfigError(FatalError):
    """Raised when an old-format config file is present but malformed."""

    pass


class SessionError(FatalError):
    """Raised when the active target cannot be applied to the environment."""

    pass
