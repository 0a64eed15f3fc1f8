"""
saferc - target and credential store for Vault command-line clients

Keeps track of every Vault a user works with, which one is current, and the
token for each, in ~/.saferc. The current target is mirrored to
~/.svtoken for other tools and can be exported as VAULT_ADDR and
VAULT_TOKEN for child processes.
"""

__version__ = "0.1.0"

from saferc.config import Config, Vault, load_config, save_config
from saferc.session import apply_session, load_and_apply

__all__ = [
    "__version__",
    "Config",
    "Vault",
    "load_config",
    "save_config",
    "apply_session",
    "load_and_apply",
]
