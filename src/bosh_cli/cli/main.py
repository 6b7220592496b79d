"""Command-line interface for bosh."""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Any, Sequence

from bosh_cli.cli.commands import COMMAND_TABLE, CommandHandlers, build_commands
from bosh_cli.cli.config import ConfigError, ConfigStore
from bosh_cli.cli.dispatch import ArgumentError, CommandDispatcher, UnknownCommand
from bosh_cli.cli.session import SessionState
from bosh_cli.errors import ApiRequestError, ApiTimeoutError, ApiUnavailableError

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_NETWORK_ERROR = 2

_SENSITIVE_FIELDS = ("password", "secret", "token", "authorization")


def _cli_version() -> str:
    try:
        return pkg_version("bosh-cli")
    except PackageNotFoundError:
        return "0.0.0+local"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bosh")
    parser.add_argument(
        "--version",
        action="version",
        version=f"bosh {_cli_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config YAML (default: $BOSH_CONFIG or ~/.bosh_config)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument("command", nargs="?", help="Command to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Positional command arguments")
    return parser


def _configure_logging(verbose: bool, stderr) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=stderr,
        force=True,
    )


def _sanitize_error_text(value: str) -> str:
    redacted = value
    for field in _SENSITIVE_FIELDS:
        redacted = re.sub(
            rf"(?i)({field}\s*[=:]\s*)([^,\s]+)",
            r"\1[REDACTED]",
            redacted,
        )
    redacted = re.sub(r"(?i)(https?://[^:/\s]+:)([^@\s]+)(@)", r"\1[REDACTED]\3", redacted)
    return redacted


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {_sanitize_error_text(message)}", file=stderr)
    return code


def _print_usage(stdout) -> None:
    print("usage: bosh [--config PATH] [--verbose] <command> [args...]", file=stdout)
    print("", file=stdout)
    print("commands:", file=stdout)
    for name, _, _, summary in sorted(COMMAND_TABLE, key=lambda row: row[0]):
        print(f"  {name:<20} {summary}", file=stdout)


def run_command(
    name: str,
    args: Sequence[str],
    *,
    store: ConfigStore,
    workdir: str | Path,
    stdout,
    **collaborators: Any,
) -> Any:
    """Run one command against ``store`` and save it if the command changed state."""
    config = store.load()
    session = SessionState(config, workdir)
    handlers = CommandHandlers(session, stdout=stdout, **collaborators)
    dispatcher = CommandDispatcher(build_commands(handlers))

    result = dispatcher.dispatch(name, list(args))
    if session.dirty:
        store.save(config)
    return result


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout=sys.stdout,
    stderr=sys.stderr,
    cwd: str | Path | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, stderr)

    if not args.command:
        _print_usage(stdout)
        return EXIT_VALIDATION_ERROR

    store = ConfigStore(args.config)
    workdir = str(cwd) if cwd is not None else os.getcwd()
    try:
        run_command(args.command, args.args, store=store, workdir=workdir, stdout=stdout)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_VALIDATION_ERROR)
    except (UnknownCommand, ArgumentError) as exc:
        return _print_error(stderr, "command error", str(exc), code=EXIT_VALIDATION_ERROR)
    except (ApiUnavailableError, ApiRequestError, ApiTimeoutError) as exc:
        return _print_error(stderr, "director error", str(exc), code=EXIT_NETWORK_ERROR)
    return EXIT_SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())
