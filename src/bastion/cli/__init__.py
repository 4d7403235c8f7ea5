"""Bastion CLI — account lock inspection and manual overrides.

Entry point registered as ``bastion`` in ``pyproject.toml``::

    [project.scripts]
    bastion = "bastion.cli:main"

The store is taken from ``--store-url`` or ``BASTION_STORE_URL``; policy and
fail mode from the other ``BASTION_*`` variables.
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``bastion`` command."""
    parser = argparse.ArgumentParser(
        prog="bastion",
        description="bastion — account lockout administration.",
    )
    parser.add_argument(
        "--store-url",
        default=None,
        help="Store URL (e.g. redis://localhost:6379/0); overrides BASTION_STORE_URL",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=("debug", "info", "warning", "error"),
        help="Logging level for engine messages",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- bastion status ---------------------------------------------------
    status_parser = subparsers.add_parser("status", help="Show lock state and failed attempts")
    status_parser.add_argument("identifier", help="Account identifier (e.g. email)")
    status_parser.add_argument("--json", action="store_true", help="Print JSON instead of text")

    # -- bastion lock -----------------------------------------------------
    lock_parser = subparsers.add_parser("lock", help="Lock an account manually")
    lock_parser.add_argument("identifier", help="Account identifier (e.g. email)")
    lock_parser.add_argument("--reason", default=None, help="Free-text reason, recorded in logs")
    lock_parser.add_argument(
        "--duration",
        type=int,
        default=None,
        help="Lock duration in seconds (0 = until unlocked; default: policy duration)",
    )

    # -- bastion unlock ---------------------------------------------------
    unlock_parser = subparsers.add_parser("unlock", help="Remove a lock (keeps attempt history)")
    unlock_parser.add_argument("identifier", help="Account identifier (e.g. email)")

    # -- bastion clear ----------------------------------------------------
    clear_parser = subparsers.add_parser("clear", help="Reset failed attempts (keeps any lock)")
    clear_parser.add_argument("identifier", help="Account identifier (e.g. email)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from bastion.cli._admin import run_command

    sys.exit(run_command(args))
