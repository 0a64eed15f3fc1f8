"""
Command-line interface for saferc.

Provides commands to list and select Vault targets, store tokens, and run
commands with the current target exported into their environment.

Uses Python's argparse module (no external CLI libraries).
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import shlex
import subprocess
import sys
from typing import Any, NoReturn

from saferc import __version__
from saferc.config.paths import RcPaths, default_paths
from saferc.config.store import load_config, save_config
from saferc.exceptions import (
    ConfigurationError,
    FatalError,
    TargetError,
)
from saferc.session import apply_session

# Set up logging
logger = logging.getLogger(__name__)

# Global verbosity settings (set during main() based on args)
_quiet_mode = False


def set_output_mode(quiet: bool = False) -> None:
    """Set the output mode for the CLI."""
    global _quiet_mode
    _quiet_mode = quiet


def output(message: str = "", force: bool = False) -> None:
    """
    Print a message to stdout, respecting quiet mode.

    Args:
        message: The message to print.
        force: If True, print even in quiet mode (for output meant for
               scripts, like JSON or shell exports).
    """
    if force or not _quiet_mode:
        print(message)


def output_error(message: str) -> None:
    """Print an error message (always shown, even in quiet mode)."""
    print(message, file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the saferc CLI."""
    parser = argparse.ArgumentParser(
        prog="saferc",
        description="Manage Vault targets and credentials in ~/.saferc",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"saferc {__version__}",
    )

    parser.add_argument(
        "--home",
        metavar="DIR",
        help="Directory holding .saferc and .svtoken (default: your home directory)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (can be repeated)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        metavar="<command>",
    )

    # target command
    target_parser = subparsers.add_parser(
        "target",
        help="Show, select or define the current target",
        description=(
            "With no arguments, show the current target. With ALIAS, make an "
            "existing target current. With ALIAS and URL, define a new target "
            "and make it current."
        ),
    )
    target_parser.add_argument("alias", nargs="?", help="Target alias or Vault URL")
    target_parser.add_argument("url", nargs="?", help="Vault URL for a new target")
    target_parser.add_argument(
        "-k", "--skip-verify",
        action="store_true",
        help="Do not verify the Vault's TLS certificate",
    )
    target_parser.set_defaults(func=cmd_target)

    # targets command
    targets_parser = subparsers.add_parser(
        "targets",
        help="List all targets",
        description="List every target in ~/.saferc, marking the current one.",
    )
    targets_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    targets_parser.set_defaults(func=cmd_targets)

    # token command
    token_parser = subparsers.add_parser(
        "token",
        help="Store a token for the current target",
        description="Save a Vault token for the current target. Prompts if omitted.",
    )
    token_parser.add_argument("token", nargs="?", help="Vault token")
    token_parser.set_defaults(func=cmd_token)

    # env command
    env_parser = subparsers.add_parser(
        "env",
        help="Print Vault environment variables",
        description="Print the VAULT_* variables for the current (or given) target.",
    )
    env_parser.add_argument(
        "--target",
        metavar="NAME",
        default="",
        help="Alias or URL to use instead of the current target",
    )
    env_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    env_parser.set_defaults(func=cmd_env)

    # exec command
    exec_parser = subparsers.add_parser(
        "exec",
        help="Run a command against a target",
        description="Run a command with the target's VAULT_* variables set.",
    )
    exec_parser.add_argument(
        "--target",
        metavar="NAME",
        default="",
        help="Alias or URL to use instead of the current target",
    )
    exec_parser.add_argument(
        "argv",
        nargs=argparse.REMAINDER,
        metavar="-- COMMAND",
        help="Command and arguments to run",
    )
    exec_parser.set_defaults(func=cmd_exec)

    return parser


def setup_logging(verbose: int, quiet: bool) -> None:
    """Configure logging based on verbosity level."""
    if quiet:
        level = logging.WARNING
    elif verbose == 0:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def get_paths(args: argparse.Namespace) -> RcPaths:
    """Resolve file locations from --home or the environment."""
    return default_paths(getattr(args, "home", None))


def cmd_target(args: argparse.Namespace) -> int:
    """Show, select or define the current target."""
    paths = get_paths(args)
    config = load_config(paths)

    if args.alias is None:
        if not config.current:
            output("No target selected")
            return 0
        output(f"Current target is {config.current}")
        output(f"  URL: {config.url()}")
        output(f"  Verify TLS: {'yes' if config.verified() else 'no'}")
        return 0

    if args.url is None:
        config.set_current(args.alias, args.skip_verify)
    else:
        config.set_target(args.alias, args.url, args.skip_verify)

    save_config(config, paths)
    output(f"Now targeting {config.current} at {config.url()}")
    if not config.verified():
        output("  (skipping TLS certificate verification)")
    return 0


def cmd_targets(args: argparse.Namespace) -> int:
    """List all targets."""
    config = load_config(get_paths(args))

    rows: list[dict[str, Any]] = [
        {
            "alias": alias,
            "url": config.vaults[alias].url,
            "verify": not config.vaults[alias].skip_verify,
            "current": alias == config.current,
        }
        for alias in config.aliases()
    ]

    if args.json:
        output(json.dumps(rows, indent=2), force=True)
        return 0

    if not rows:
        output("No targets defined. Use 'saferc target ALIAS URL' to add one.")
        return 0

    width = max(len(row["alias"]) for row in rows)
    output("Known Vault targets:")
    for row in rows:
        marker = "*" if row["current"] else " "
        note = "" if row["verify"] else "  (noverify)"
        output(f" {marker} {row['alias']:<{width}}  {row['url']}{note}")
    return 0


def cmd_token(args: argparse.Namespace) -> int:
    """Store a token for the current target."""
    paths = get_paths(args)
    config = load_config(paths)

    token = args.token
    if token is None:
        token = getpass.getpass("Token: ").strip()
    if not token:
        output_error("Error: Token must not be empty.")
        return 1

    config.set_token(token)
    save_config(config, paths)
    output(f"Token saved for {config.current}")
    return 0


def cmd_env(args: argparse.Namespace) -> int:
    """Print Vault environment variables."""
    paths = get_paths(args)
    config = load_config(paths)

    exported = apply_session(config, args.target, dict(os.environ), paths)

    if args.json:
        output(json.dumps(exported, indent=2), force=True)
        return 0

    for name, value in exported.items():
        output(f"export {name}={shlex.quote(value)}", force=True)
    return 0


def cmd_exec(args: argparse.Namespace) -> int:
    """Run a command with a target's environment."""
    argv = list(args.argv)
    if argv and argv[0] == "--":
        argv = argv[1:]
    if not argv:
        output_error("Error: No command given.")
        return 1

    paths = get_paths(args)
    config = load_config(paths)

    env = dict(os.environ)
    apply_session(config, args.target, env, paths)

    logger.debug("Running %s", argv[0])
    try:
        result = subprocess.run(argv, env=env)
    except OSError as e:
        output_error(f"Error: Cannot run {argv[0]}: {e}")
        return 1
    return result.returncode


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the saferc CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Set up logging and output mode
    setup_logging(args.verbose, args.quiet)
    set_output_mode(args.quiet)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        exit_code = args.func(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        output("\nOperation cancelled.")
        sys.exit(130)
    except FatalError as e:
        output_error(f"!!! {e}")
        sys.exit(1)
    except TargetError as e:
        output_error(f"Target error: {e}")
        sys.exit(2)
    except ConfigurationError as e:
        output_error(f"Configuration error: {e}")
        sys.exit(2)
    except Exception as e:
        if args.verbose > 0:
            raise
        output_error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
