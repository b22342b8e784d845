"""Common types and data structures for leapconnect"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional


class Scope(Enum):
    """Deployment scope - which supervisor instance owns the units"""
    SYSTEM = "system"  # Boot-time, /etc/systemd/system
    USER = "user"      # Login-time, ~/.config/systemd/user


class Mode(Enum):
    """Operating mode selected once at startup"""
    INSTALL = "install"
    UNINSTALL = "uninstall"
    DRY_RUN = "dry_run"
    HELP = "help"


class Identity(Enum):
    """Identity under which supervisor calls run"""
    ROOT = "root"
    IMPERSONATED = "impersonated"


class UnitRole(Enum):
    """The three supervised unit definitions"""
    CONNECTOR_SERVICE = "connector_service"
    RECONNECT_SERVICE = "reconnect_service"
    RECONNECT_TIMER = "reconnect_timer"


@dataclass(frozen=True)
class ServerAddress:
    """Server endpoint decomposed into host and optional port"""
    host: str
    port: Optional[int] = None

    def __str__(self) -> str:
        """Render back to the `host[:port]` form the connector expects"""
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class Configuration:
    """Canonical, immutable run configuration"""
    username: str
    server_address: Optional[str]
    scope: Scope
    mode: Mode


@dataclass(frozen=True)
class UnitSpec:
    """A named unit role and the placeholders its template consumes"""
    role: UnitRole
    name: str
    placeholders: frozenset[str]


@dataclass(frozen=True)
class RenderedUnit:
    """Unit file name and its rendered content"""
    name: str
    content: str


@dataclass(frozen=True)
class ExecutionContext:
    """Identity and environment for supervisor-facing calls"""
    identity: Identity
    username: Optional[str] = None
    env: Mapping[str, str] = field(default_factory=dict)

    def isImpersonated(self) -> bool:
        """Check if calls must run as the target user"""
        return self.identity is Identity.IMPERSONATED

    def command_build(self, argv: list[str]) -> list[str]:
        """
        Wrap a command so it runs under this context.

        Root commands run directly. Impersonated commands run through
        `sudo -u` with the synthesized environment passed via `env`, since
        sudo resets the caller's environment.

        Args:
            argv:
                Command to run.

        Returns:
            Full argv to execute.
        """
        if not self.isImpersonated():
            return list(argv)
        if not self.username:
            raise ValueError("Impersonated context requires a username")
        assignments: list[str] = [f"{key}={value}" for key, value in sorted(self.env.items())]
        return ["sudo", "-u", self.username, "env", *assignments, *argv]
