"""
Installer logging.

Progress and warnings go to stderr so that dry-run output on stdout stays
exactly the rendered unit content. An optional log file receives the same
records, which is useful when the installer runs from provisioning scripts.
"""

from __future__ import annotations

import logging

from leapconnect import __version__

__all__ = [
    "logging_setup",
    "logFormatWithVersion_get",
]


def logLevel_resolve(level: str) -> int:
    """
    Map a level name from flags or the settings file to its numeric value.

    Raises:
        ValueError:
            Raised for names the logging module does not define.
    """
    level_value = getattr(logging, level.upper(), None)
    if not isinstance(level_value, int):
        raise ValueError(f"Unknown log level: {level}")
    return level_value


def logging_setup(level: str, log_format: str, log_file: str | None) -> None:
    """
    Configure root logging for one installer run.

    Args:
        level:
            Level name, already resolved from override flags and settings.
        log_format:
            Formatter string from the `logging.format` setting.
        log_file:
            Optional path from the `logging.file` setting.
    """
    level_value: int = logLevel_resolve(level)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level_value,
        format=logFormatWithVersion_get(log_format),
        handlers=handlers,
        force=True,
    )


def logFormatWithVersion_get(log_format: str) -> str:
    """Tag timestamped records with the installer version"""
    return log_format.replace("%(asctime)s", f"%(asctime)s [leapconnect {__version__}]")
