"""Dry run: render units and print them, touching nothing"""

from __future__ import annotations

import sys
from typing import TextIO

from leapconnect.common.types import Configuration, RenderedUnit
from leapconnect.service import scope as scope_strategy
from leapconnect.service.installer import units_render

__all__ = ["dryRun_run"]


def dryRun_run(config: Configuration, stream: TextIO | None = None) -> list[RenderedUnit]:
    """
    Print every rendered unit, labeled by name.

    Only the binary path is resolved; no destination, ownership or
    supervisor context is needed.

    Args:
        config:
            Resolved DRY_RUN configuration.
        stream:
            Output stream, stdout by default.

    Returns:
        The rendered units, for callers that want the content.
    """
    out: TextIO = stream if stream is not None else sys.stdout
    units: list[RenderedUnit] = units_render(config, scope_strategy.binaryPath_resolve())
    for unit in units:
        out.write(f"=== {unit.name} ===\n")
        out.write(unit.content)
        if not unit.content.endswith("\n"):
            out.write("\n")
    return units
