"""Credential cache -- command-line entry point.

Usage::

    python -m credential_cache [--config PATH] [--verbose] [--format text|json] get KEY
    python -m credential_cache ... set KEY [--data VALUE] [--label L] [--description D]
    python -m credential_cache ... remove KEY

Startup sequence:
    1. Parse CLI arguments
    2. Load configuration from YAML (or defaults) and apply CLI overrides
    3. Configure logging
    4. Build dependencies (config directory, keyring, keychain)
    5. Run the requested command and map failures to an exit code
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from credential_cache.config import Settings, load_settings
from credential_cache.deps import Dependencies, build_dependencies
from credential_cache.errors import (
    CredentialCacheError,
    MalformedStoreError,
    StorageUnavailableError,
)

logger = logging.getLogger("credential_cache")

EXIT_OK = 0
EXIT_FAILURE = 1


# ---------------------------------------------------------------------------
# Integration seams -- module-level names so tests can patch them.
# ---------------------------------------------------------------------------


def load_config(config_path: str | None) -> Settings:
    """Load configuration from a YAML file or return defaults."""
    path = Path(config_path) if config_path else None
    return load_settings(config_path=path)


def create_dependencies(settings: Settings) -> Dependencies:
    return build_dependencies(settings, logger=logger)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(fmt: str, verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=[handler],
        force=True,
    )


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv:
        Argument list.  Defaults to ``sys.argv[1:]`` when ``None``.
    """
    parser = argparse.ArgumentParser(
        prog="credential-cache",
        description="Inspect and edit the local credential cache",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default=None,
        help="Output and log format (default: text)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Print the secret stored under KEY")
    get_cmd.add_argument("key")

    set_cmd = commands.add_parser("set", help="Store a secret under KEY")
    set_cmd.add_argument("key")
    set_cmd.add_argument(
        "--data",
        type=str,
        default=None,
        help="Secret value (read from stdin when omitted)",
    )
    set_cmd.add_argument("--label", type=str, default=None)
    set_cmd.add_argument("--description", type=str, default=None)

    remove_cmd = commands.add_parser("remove", help="Delete the secret stored under KEY")
    remove_cmd.add_argument("key")

    return parser.parse_args(argv)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    update = {}
    if args.verbose is not None:
        update["verbose"] = args.verbose
    if args.format is not None:
        update["format"] = args.format
    if not update:
        return settings
    return settings.model_copy(
        update={"logging": settings.logging.model_copy(update=update)}
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_get(deps: Dependencies, args: argparse.Namespace) -> None:
    item = deps.keychain.get_item(args.key)
    if deps.settings.logging.format == "json":
        print(item.model_dump_json(indent=2))
    else:
        sys.stdout.buffer.write(item.data)
        sys.stdout.buffer.flush()


def _cmd_set(deps: Dependencies, args: argparse.Namespace) -> None:
    if args.data is not None:
        data = args.data.encode("utf-8")
    else:
        data = sys.stdin.buffer.read()
    deps.keychain.set(args.key, data, label=args.label, description=args.description)
    logger.info("Stored %s in %s", args.key, deps.keyring_path)


def _cmd_remove(deps: Dependencies, args: argparse.Namespace) -> None:
    deps.keychain.remove(args.key)
    logger.info("Removed %s from %s", args.key, deps.keyring_path)


_COMMANDS = {
    "get": _cmd_get,
    "set": _cmd_set,
    "remove": _cmd_remove,
}


def run_command(deps: Dependencies, args: argparse.Namespace) -> int:
    """Run one command against *deps* and return the process exit code."""
    try:
        _COMMANDS[args.command](deps, args)
    except CredentialCacheError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE
    return EXIT_OK


# ---------------------------------------------------------------------------
# Script entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """Parse CLI args, build dependencies and run the command."""
    args = parse_args(argv)

    try:
        settings = _apply_overrides(load_config(args.config), args)
    except (yaml.YAMLError, ValidationError, OSError) as exc:
        configure_logging(args.format or "text", bool(args.verbose))
        logger.error("invalid configuration: %s", exc)
        return EXIT_FAILURE

    configure_logging(settings.logging.format, settings.logging.verbose)

    try:
        deps = create_dependencies(settings)
    except MalformedStoreError as exc:
        logger.error("%s; fix or delete the file to continue", exc)
        return EXIT_FAILURE
    except StorageUnavailableError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE

    if not deps.persistent:
        logger.warning("Credentials will not persist beyond this session")

    return run_command(deps, args)


if __name__ == "__main__":
    sys.exit(main())
