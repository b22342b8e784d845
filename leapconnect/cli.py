"""leapconnect command-line interface"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Optional

import yaml

from leapconnect import __version__
from leapconnect.common.config import Config, ConfigLoader
from leapconnect.common.errors import LeapConnectError, ValidationError
from leapconnect.common.logging_setup import logging_setup
from leapconnect.common.settings import settings
from leapconnect.common.types import Configuration, Mode
from leapconnect.service.dryrun import dryRun_run
from leapconnect.service.installer import Installer
from leapconnect.service.resolver import configuration_resolve
from leapconnect.service.uninstaller import Uninstaller


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors as ValidationError"""

    def error(self, message: str) -> NoReturn:
        raise ValidationError(message)


def parser_build() -> argparse.ArgumentParser:
    """
    Build the command-line parser

    Returns:
        Configured parser
    """
    parser = _ArgumentParser(
        prog="leapconnect",
        description="Install systemd units that keep the InputLeap client connected",
        epilog="Run with no arguments to be prompted for username, server and scope.",
        add_help=False,
        allow_abbrev=False,
    )

    parser.add_argument("-h", "--help", action="store_true", help="Show this help and exit")
    parser.add_argument("--version", action="version", version=f"leapconnect {__version__}")

    parser.add_argument(
        "--user",
        type=str,
        metavar="USERNAME",
        default=None,
        help="User to run the InputLeap client as (required with any other flag)",
    )

    parser.add_argument(
        "--server",
        type=str,
        metavar="ADDRESS",
        default=None,
        help="InputLeap server as HOST[:PORT] (e.g., 192.168.1.100:24800)",
    )

    scope_group = parser.add_mutually_exclusive_group()
    scope_group.add_argument(
        "--system",
        action="store_true",
        help="Install as boot-time system units (default)",
    )
    scope_group.add_argument(
        "--user-level",
        action="store_true",
        dest="user_level",
        help="Install as login-time units under the user's home directory",
    )

    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--uninstall", action="store_true", help="Stop, disable and remove installed units"
    )
    action_group.add_argument(
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="Print rendered units without writing files or calling systemctl",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to settings file (default: search standard locations)",
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging (overrides config)"
    )

    parser.add_argument(
        "--info", action="store_true", help="Enable info logging (overrides config)"
    )

    parser.add_argument(
        "--warning", action="store_true", help="Enable warning logging (overrides config)"
    )

    parser.add_argument(
        "--error", action="store_true", help="Enable error logging (overrides config)"
    )

    parser.add_argument(
        "--critical", action="store_true", help="Enable critical logging (overrides config)"
    )

    return parser


def logLevelOverride_get(args: argparse.Namespace) -> str | None:
    """
    Resolve explicit log level override flags.

    Args:
        args: Parsed CLI args.

    Returns:
        Selected log level or None.
    """
    if args.critical:
        return "CRITICAL"
    if args.error:
        return "ERROR"
    if args.warning:
        return "WARNING"
    if args.info:
        return "INFO"
    if args.debug:
        return "DEBUG"
    return None


def settingsWithLogging_load(args: argparse.Namespace) -> Config:
    """
    Load the settings file, initialize settings and configure logging.

    Args:
        args: Parsed CLI args.

    Returns:
        Loaded settings.
    """
    config_path: Path | None = Path(args.config) if args.config else None
    config: Config = ConfigLoader.config_load(config_path)
    settings.initialize(config)
    log_level: str = logLevelOverride_get(args) or config.logging.level
    logging_setup(log_level, config.logging.format, config.logging.file)
    return config


def mode_dispatch(configuration: Configuration, parser: argparse.ArgumentParser) -> None:
    """
    Hand the configuration to exactly one orchestrator.

    Args:
        configuration: Resolved configuration.
        parser: Parser, for help output.
    """
    if configuration.mode is Mode.HELP:
        parser.print_help()
    elif configuration.mode is Mode.DRY_RUN:
        dryRun_run(configuration)
    elif configuration.mode is Mode.UNINSTALL:
        Uninstaller(configuration).run()
    else:
        Installer(configuration).run()


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """
    Main entry point for the leapconnect command

    Args:
        argv: Arguments without program name; defaults to sys.argv[1:].
    """
    raw_args: list[str] = list(sys.argv[1:] if argv is None else argv)
    parser: argparse.ArgumentParser = parser_build()

    try:
        args: argparse.Namespace = parser.parse_args(raw_args)
        if not args.help:
            settingsWithLogging_load(args)
        configuration: Configuration = configuration_resolve(args, raw_args)
        mode_dispatch(configuration, parser)
        sys.exit(0)

    except KeyboardInterrupt:
        print("\nInterrupted, installation may be incomplete", file=sys.stderr)
        sys.exit(1)
    except (LeapConnectError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
