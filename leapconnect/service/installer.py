"""
Install orchestration.

Validation and resolution happen before anything is written. Once writing
starts there is no rollback: a supervisor failure leaves the written unit
files in place and surfaces the failing command's exit status.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from leapconnect.common.errors import ResolutionError
from leapconnect.common.settings import settings
from leapconnect.common.types import Configuration, RenderedUnit, Scope, UnitRole, UnitSpec
from leapconnect.service import scope as scope_strategy
from leapconnect.service.supervisor import CommandRunner, Supervisor, command_run
from leapconnect.service.template import (
    BINARY_PATH,
    SERVER_ADDRESS,
    USERNAME_TOKEN,
    render,
    templateText_load,
)

__all__ = [
    "UNIT_SPECS",
    "ACTIVATED_UNITS",
    "Installer",
    "bindings_build",
    "logHint_get",
    "units_render",
]

logger = logging.getLogger(__name__)

UNIT_SPECS: tuple[UnitSpec, ...] = (
    UnitSpec(
        role=UnitRole.CONNECTOR_SERVICE,
        name=settings.CONNECTOR_SERVICE,
        placeholders=frozenset({BINARY_PATH, SERVER_ADDRESS, USERNAME_TOKEN}),
    ),
    UnitSpec(
        role=UnitRole.RECONNECT_SERVICE,
        name=settings.RECONNECT_SERVICE,
        placeholders=frozenset({BINARY_PATH}),
    ),
    UnitSpec(
        role=UnitRole.RECONNECT_TIMER,
        name=settings.RECONNECT_TIMER,
        placeholders=frozenset({BINARY_PATH}),
    ),
)

# Units enabled and started; the reconnect service is driven by its timer
ACTIVATED_UNITS: tuple[str, ...] = (settings.CONNECTOR_SERVICE, settings.RECONNECT_TIMER)


def bindings_build(spec: UnitSpec, config: Configuration, binary_path: str) -> dict[str, str]:
    """
    Build the placeholder bindings for one unit.

    Only the tokens the unit declares are bound. The username is bound in
    the system scope only; user-scope units run as the session owner.
    """
    values: dict[str, str] = {
        BINARY_PATH: binary_path,
        SERVER_ADDRESS: config.server_address or "",
        USERNAME_TOKEN: config.username,
    }
    tokens: frozenset[str] = spec.placeholders
    if config.scope is not Scope.SYSTEM:
        tokens = tokens - {USERNAME_TOKEN}
    return {token: values[token] for token in tokens}


def units_render(config: Configuration, binary_path: str) -> list[RenderedUnit]:
    """
    Render all three units for `config`.

    Both the installer and the dry-run path go through here, so their
    output is identical for the same configuration.

    Raises:
        TemplateError:
            Raised when a template source is unavailable.
    """
    templates_dir: str | None = settings.config.units.templates_dir
    rendered: list[RenderedUnit] = []
    for spec in UNIT_SPECS:
        text: str = templateText_load(config.scope, spec.name, templates_dir)
        rendered.append(
            RenderedUnit(name=spec.name, content=render(text, bindings_build(spec, config, binary_path)))
        )
    return rendered


def logHint_get(scope: Scope) -> str:
    """Return the journal command for following connector logs"""
    unit: str = settings.CONNECTOR_SERVICE.removesuffix(".service")
    if scope is Scope.SYSTEM:
        return f"journalctl -u {unit} -f"
    return f"journalctl --user-unit {unit} -f"


class Installer:
    """Drives validation, rendering, writing and activation for one install"""

    def __init__(self, config: Configuration, runner: CommandRunner = command_run) -> None:
        """
        Prepare an install pass.

        Args:
            config:
                Resolved INSTALL configuration.
            runner:
                Command executor for supervisor calls.
        """
        self._config: Configuration = config
        self._runner: CommandRunner = runner

    def existingUnits_find(self, destination: Path) -> list[str]:
        """List unit names already present in `destination`, dangling links included"""
        return [
            spec.name
            for spec in UNIT_SPECS
            if (destination / spec.name).is_symlink() or (destination / spec.name).exists()
        ]

    def units_write(self, destination: Path, units: list[RenderedUnit]) -> None:
        """Write rendered units with fixed permission bits"""
        for unit in units:
            path: Path = destination / unit.name
            # Replace whatever is there, never write through a link
            if path.is_symlink() or path.exists():
                path.unlink()
            fd: int = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL | os.O_NOFOLLOW, settings.UNIT_FILE_MODE)
            with os.fdopen(fd, "w") as f:
                os.fchmod(f.fileno(), settings.UNIT_FILE_MODE)
                f.write(unit.content)
            logger.info(f"Wrote {path}")

    def run(self) -> None:
        """
        Execute the install sequence.

        Raises:
            ResolutionError:
                Raised when the binary or destination cannot be resolved.
            TemplateError:
                Raised when a template cannot be read.
            OperationalError:
                Raised when a supervisor call fails.
        """
        config: Configuration = self._config
        binary_path: str = scope_strategy.binaryPath_resolve()
        destination: Path = scope_strategy.destinationDir_resolve(config.scope, config.username)
        if config.scope is Scope.USER and destination.is_symlink():
            raise ResolutionError(f"Refusing to install into symlinked directory: {destination}")

        existing: list[str] = self.existingUnits_find(destination)
        if existing:
            logger.warning(f"Existing unit files will be overwritten in {destination}: {', '.join(existing)}")

        units: list[RenderedUnit] = units_render(config, binary_path)

        logger.info(f"Installing to {destination}")
        created_dirs: list[Path] = scope_strategy.destinationDir_create(destination)
        self.units_write(destination, units)
        scope_strategy.ownershipPolicy_apply(config.scope, config.username, destination, created_dirs)

        supervisor = Supervisor(
            scope_strategy.executionContext_resolve(config.scope, config.username), self._runner
        )
        supervisor.daemon_reload()
        supervisor.units_enable(ACTIVATED_UNITS)
        supervisor.units_start(ACTIVATED_UNITS)
        supervisor.status_show([settings.CONNECTOR_SERVICE])

        print("InputLeap installed successfully")
        print(f"View logs: {logHint_get(config.scope)}")
