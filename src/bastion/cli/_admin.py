"""Implementation of the ``bastion`` admin subcommands."""

import argparse
import dataclasses
import json
import logging
import sys
from datetime import UTC, datetime

from bastion.config import load_settings
from bastion.engine import LockoutEngine, LockoutStatus
from bastion.errors import BastionError, ConfigurationError, ValidationError
from bastion.identifiers import normalize_identifier
from bastion.store import open_store

logger = logging.getLogger("bastion.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def _build_engine(args: argparse.Namespace) -> LockoutEngine:
    settings = load_settings()
    if args.store_url:
        settings = dataclasses.replace(settings, store_url=args.store_url)
    store = open_store(settings)
    store.ping()
    return LockoutEngine.from_settings(settings, store)


def _format_status(status: LockoutStatus) -> str:
    lines = [
        f"identifier:         {status.identifier}",
        f"state:              {status.state.value}",
        f"failed attempts:    {status.attempts}",
        f"remaining attempts: {status.remaining_attempts}",
    ]
    if status.locked:
        if status.indefinite:
            lines.append("lock expires:       never (unlock manually)")
        else:
            lines.append(f"lock expires in:    {status.lock_remaining_seconds} s")
        if status.locked_at is not None:
            locked_at = datetime.fromtimestamp(status.locked_at, tz=UTC)
            lines.append(f"locked at:          {locked_at.isoformat(timespec='seconds')}")
    return "\n".join(lines)


def _status_json(status: LockoutStatus) -> str:
    payload = dataclasses.asdict(status)
    payload["state"] = status.state.value
    return json.dumps(payload, indent=2)


def run_command(args: argparse.Namespace) -> int:
    """Run one admin subcommand and return the process exit code."""
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        engine = _build_engine(args)
        match args.command:
            case "status":
                status = engine.status(args.identifier)
                print(_status_json(status) if args.json else _format_status(status))
            case "lock":
                engine.lock_account(args.identifier, args.reason, args.duration)
                print(f"Locked {normalize_identifier(args.identifier)}")
            case "unlock":
                engine.unlock_account(args.identifier)
                print(f"Unlocked {normalize_identifier(args.identifier)}")
            case "clear":
                engine.clear_login_failures(args.identifier)
                print(f"Cleared failed attempts for {normalize_identifier(args.identifier)}")
    except (ValidationError, ConfigurationError) as exc:
        print(f"bastion: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except BastionError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"bastion: {exc}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK
