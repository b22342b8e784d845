"""
systemd supervisor control through `systemctl`.

Every call runs under an explicit ExecutionContext rather than the process
environment, so a root process can drive a user's own manager instance.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Sequence

from leapconnect.common.errors import OperationalError
from leapconnect.common.settings import settings
from leapconnect.common.types import ExecutionContext

__all__ = ["CommandRunner", "Supervisor", "command_run"]

logger = logging.getLogger(__name__)

CommandRunner = Callable[[list[str]], int]


def command_run(argv: list[str]) -> int:
    """
    Execute `argv`, inheriting stdout/stderr, and return its exit status.

    Args:
        argv:
            Full command line.

    Returns:
        Process exit status.
    """
    try:
        completed = subprocess.run(argv, check=False)
    except FileNotFoundError:
        logger.error(f"Command not found: {argv[0]}")
        return 127
    return completed.returncode


class Supervisor:
    """Issues supervisor verbs over named units within one execution context"""

    def __init__(self, context: ExecutionContext, runner: CommandRunner = command_run) -> None:
        """
        Bind supervisor calls to a context.

        Args:
            context:
                Identity and environment the calls run under.
            runner:
                Command executor returning an exit status.
        """
        self._context: ExecutionContext = context
        self._runner: CommandRunner = runner

    def _argv_build(self, verb: str, units: Sequence[str], *options: str) -> list[str]:
        argv: list[str] = [settings.SUPERVISOR_COMMAND]
        if self._context.isImpersonated():
            argv.append("--user")
        argv.extend(options)
        argv.append(verb)
        argv.extend(units)
        return self._context.command_build(argv)

    def _verb_run(self, verb: str, units: Sequence[str], *options: str) -> int:
        argv: list[str] = self._argv_build(verb, units, *options)
        logger.debug(f"Running: {' '.join(argv)}")
        return self._runner(argv)

    def _verb_require(self, verb: str, units: Sequence[str]) -> None:
        argv: list[str] = self._argv_build(verb, units)
        logger.debug(f"Running: {' '.join(argv)}")
        returncode: int = self._runner(argv)
        if returncode != 0:
            raise OperationalError(argv, returncode)

    def daemon_reload(self) -> None:
        """Reload unit definitions; raises OperationalError on failure"""
        self._verb_require("daemon-reload", [])

    def units_enable(self, units: Sequence[str]) -> None:
        """Enable persistent activation; raises OperationalError on failure"""
        self._verb_require("enable", units)

    def units_start(self, units: Sequence[str]) -> None:
        """Start units; raises OperationalError on failure"""
        self._verb_require("start", units)

    def units_stop(self, units: Sequence[str]) -> int:
        """Stop units and return the exit status without raising"""
        return self._verb_run("stop", units)

    def units_disable(self, units: Sequence[str]) -> int:
        """Disable units and return the exit status without raising"""
        return self._verb_run("disable", units)

    def status_show(self, units: Sequence[str]) -> int:
        """Print unit status and return the exit status without raising"""
        return self._verb_run("status", units, "--no-pager")
