"""Pytest configuration and shared fixtures for leapconnect tests

This module provides common fixtures and test utilities used across
the unit tests. Nothing here touches the real identity database,
filesystem outside tmp_path, or systemd.
"""

from __future__ import annotations

import logging
import pwd
from pathlib import Path
from typing import Callable, Generator

import pytest

from leapconnect.common.config import ConfigLoader
from leapconnect.common.settings import settings


class FakeRunner:
    """Records supervisor command lines and returns scripted exit codes"""

    def __init__(self, failures: dict[str, int] | None = None) -> None:
        self.calls: list[list[str]] = []
        self._failures: dict[str, int] = failures or {}

    def __call__(self, argv: list[str]) -> int:
        self.calls.append(list(argv))
        for verb, returncode in self._failures.items():
            if verb in argv:
                return returncode
        return 0

    def verbs(self) -> list[str]:
        """Return the systemctl verb of each recorded call"""
        known = {"daemon-reload", "enable", "start", "stop", "disable", "status"}
        return [next(arg for arg in argv if arg in known) for argv in self.calls]


@pytest.fixture
def reset_settings() -> Generator[None, None, None]:
    """Reset settings singleton between tests

    This fixture ensures each test gets a fresh Settings instance.
    """
    settings._initialized = False
    settings._config = None
    yield
    settings._initialized = False
    settings._config = None


@pytest.fixture(autouse=True)
def default_settings(tmp_path: Path) -> Generator[Path, None, None]:
    """Initialize settings with defaults and a system unit dir under tmp_path"""
    system_dir = tmp_path / "etc" / "systemd" / "system"
    settings.initialize(ConfigLoader.config_parse({"units": {"system_dir": str(system_dir)}}))
    yield system_dir
    settings._config = None


@pytest.fixture
def users(monkeypatch, tmp_path: Path) -> dict[str, pwd.struct_passwd]:
    """Fake identity database with `alice` (uid 1000) and `bob` (uid 1001)"""
    entries = {
        "alice": pwd.struct_passwd(("alice", "x", 1000, 1000, "", str(tmp_path / "home" / "alice"), "/bin/bash")),
        "bob": pwd.struct_passwd(("bob", "x", 1001, 100, "", str(tmp_path / "home" / "bob"), "/bin/bash")),
    }

    def getpwnam(name: str) -> pwd.struct_passwd:
        if name not in entries:
            raise KeyError(f"getpwnam(): name not found: '{name}'")
        return entries[name]

    monkeypatch.setattr(pwd, "getpwnam", getpwnam)
    return entries


@pytest.fixture
def connector_binary(monkeypatch) -> str:
    """Pretend input-leapc is installed at /usr/bin/input-leapc"""
    path = "/usr/bin/input-leapc"

    def which(name: str) -> str | None:
        return path if name == "input-leapc" else None

    monkeypatch.setattr("shutil.which", which)
    return path


@pytest.fixture
def chown_calls(monkeypatch) -> list[tuple[Path, int, int]]:
    """Record os.chown calls instead of changing ownership; links must not be followed"""
    calls: list[tuple[Path, int, int]] = []

    def chown(path, uid: int, gid: int, *, follow_symlinks: bool = True) -> None:
        if follow_symlinks:
            raise AssertionError(f"chown would follow links: {path}")
        calls.append((Path(path), uid, gid))

    monkeypatch.setattr("os.chown", chown)
    return calls


@pytest.fixture
def runner_factory() -> Callable[..., FakeRunner]:
    """Build FakeRunner instances with optional per-verb failures"""
    return FakeRunner


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)
