"""
Entry point for running saferc as a module.

Usage:
    python -m saferc [command] [options]
"""

from saferc.cli import main

if __name__ == "__main__":
    main()
