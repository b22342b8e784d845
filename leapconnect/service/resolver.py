"""
Configuration resolution and mode selection.

Decision order:
1. `--help` selects HELP and nothing else is checked.
2. No recognized argument at all selects interactive INSTALL.
3. Otherwise flags are authoritative and nothing is prompted.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Callable

from leapconnect.common.errors import PrivilegeError, ValidationError
from leapconnect.common.types import Configuration, Mode, Scope
from leapconnect.service import validator

__all__ = [
    "PromptFunc",
    "configuration_resolve",
    "interactive_isSelected",
    "privilege_check",
    "scopeAnswer_parse",
]

logger = logging.getLogger(__name__)

PromptFunc = Callable[[str], str]

USERNAME_PROMPT = "Enter username to run InputLeap as: "
SERVER_PROMPT = "Enter server address (host[:port]): "
SCOPE_PROMPT = "Install as system-wide service? (y/n, default: y): "

YES_ANSWERS = {"", "y", "yes"}
NO_ANSWERS = {"n", "no"}


def privilege_check(mode: Mode, euid_get: Callable[[], int] | None = None) -> None:
    """
    Require root for modes that mutate the system.

    Raises:
        PrivilegeError:
            Raised for INSTALL or UNINSTALL without effective uid 0.
    """
    euid: int = (euid_get or os.geteuid)()
    if mode in (Mode.INSTALL, Mode.UNINSTALL) and euid != 0:
        raise PrivilegeError("Must run as root (try sudo)")


def interactive_isSelected(argv: list[str]) -> bool:
    """
    Determine whether prompting should be used.

    Args:
        argv:
            Raw command-line arguments, program name excluded.

    Returns:
        True when no argument was supplied at all.
    """
    return len(argv) == 0


def scopeAnswer_parse(answer: str) -> Scope:
    """
    Map a yes/no answer to a scope, empty meaning the default (system).

    Raises:
        ValidationError:
            Raised for anything other than y/yes/n/no/empty.
    """
    normalized: str = answer.strip().lower()
    if normalized in YES_ANSWERS:
        return Scope.SYSTEM
    if normalized in NO_ANSWERS:
        return Scope.USER
    raise ValidationError(f"Expected y or n, got: {answer}")


def _prompt(prompt_func: PromptFunc | None, text: str) -> str:
    try:
        return (prompt_func or input)(text).strip()
    except EOFError as exc:
        raise ValidationError("No input received") from exc


def interactive_resolve(
    prompt_func: PromptFunc | None = None,
    euid_get: Callable[[], int] | None = None,
) -> Configuration:
    """
    Build an INSTALL configuration by prompting.

    Each answer is validated before the next question is asked.
    """
    privilege_check(Mode.INSTALL, euid_get)

    username: str = validator.username_validate(_prompt(prompt_func, USERNAME_PROMPT))
    server: str = _prompt(prompt_func, SERVER_PROMPT)
    validator.address_validate(server)
    scope: Scope = scopeAnswer_parse(_prompt(prompt_func, SCOPE_PROMPT))

    return Configuration(username=username, server_address=server, scope=scope, mode=Mode.INSTALL)


def flags_resolve(
    args: argparse.Namespace,
    euid_get: Callable[[], int] | None = None,
) -> Configuration:
    """
    Build a configuration from parsed flags without prompting.

    Raises:
        ValidationError:
            Raised when a required flag is missing or a value is malformed.
        PrivilegeError:
            Raised when the selected mode needs root.
    """
    if args.uninstall:
        mode: Mode = Mode.UNINSTALL
    elif args.dry_run:
        mode = Mode.DRY_RUN
    else:
        mode = Mode.INSTALL
    privilege_check(mode, euid_get)

    if not args.user:
        raise ValidationError("--user USERNAME is required")
    username: str = validator.username_validate(args.user)
    scope: Scope = Scope.USER if args.user_level else Scope.SYSTEM

    server: str | None = args.server
    if mode is not Mode.UNINSTALL:
        if not server:
            raise ValidationError("--server ADDRESS is required")
        validator.address_validate(server)

    return Configuration(username=username, server_address=server, scope=scope, mode=mode)


def configuration_resolve(
    args: argparse.Namespace,
    argv: list[str],
    prompt_func: PromptFunc | None = None,
    euid_get: Callable[[], int] | None = None,
) -> Configuration:
    """
    Resolve the single run configuration.

    Args:
        args:
            Parsed command-line namespace.
        argv:
            Raw arguments, used to detect the zero-argument case.
        prompt_func:
            Prompt callback for interactive mode.
        euid_get:
            Effective uid callback.

    Returns:
        Immutable configuration.
    """
    if args.help:
        return Configuration(username="", server_address=None, scope=Scope.SYSTEM, mode=Mode.HELP)
    if interactive_isSelected(argv):
        logger.debug("No arguments supplied, prompting for configuration")
        return interactive_resolve(prompt_func, euid_get)
    return flags_resolve(args, euid_get)
