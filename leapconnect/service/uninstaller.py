"""Uninstall orchestration, safe to run when nothing is installed"""

from __future__ import annotations

import logging
from pathlib import Path

from leapconnect.common.types import Configuration
from leapconnect.service import scope as scope_strategy
from leapconnect.service.installer import ACTIVATED_UNITS, UNIT_SPECS
from leapconnect.service.supervisor import CommandRunner, Supervisor, command_run

__all__ = ["Uninstaller"]

logger = logging.getLogger(__name__)


class Uninstaller:
    """Drives stop, disable, delete and reload for one uninstall"""

    def __init__(self, config: Configuration, runner: CommandRunner = command_run) -> None:
        self._config: Configuration = config
        self._runner: CommandRunner = runner

    def units_delete(self, destination: Path) -> list[Path]:
        """Delete the known unit files that exist; return the deleted paths"""
        removed: list[Path] = []
        for spec in UNIT_SPECS:
            path: Path = destination / spec.name
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            removed.append(path)
            logger.info(f"Removed {path}")
        return removed

    def run(self) -> None:
        """
        Execute the uninstall sequence.

        Stop and disable failures mean the units were not active or not
        enabled and are only logged. The final reload must succeed.

        Raises:
            ResolutionError:
                Raised when the destination cannot be resolved.
            OperationalError:
                Raised when the supervisor reload fails.
        """
        config: Configuration = self._config
        destination: Path = scope_strategy.destinationDir_resolve(config.scope, config.username)
        supervisor = Supervisor(
            scope_strategy.executionContext_resolve(config.scope, config.username), self._runner
        )

        if supervisor.units_stop(ACTIVATED_UNITS) != 0:
            logger.debug("Stop returned non-zero, units were not running")
        if supervisor.units_disable(ACTIVATED_UNITS) != 0:
            logger.debug("Disable returned non-zero, units were not enabled")

        if not self.units_delete(destination):
            logger.info(f"No unit files found in {destination}")

        supervisor.daemon_reload()
        logger.info("InputLeap uninstalled")
