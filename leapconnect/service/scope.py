"""
Scope strategy: where units live and whose supervisor manages them.

System scope writes to the fixed system unit directory and talks to the
system manager as root. User scope writes under the target user's home and
reaches that user's own manager through their runtime directory and
session bus.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from leapconnect.common.errors import ResolutionError
from leapconnect.common.settings import settings
from leapconnect.common.types import ExecutionContext, Identity, Scope
from leapconnect.service import identity

__all__ = [
    "binaryPath_resolve",
    "destinationDir_resolve",
    "executionContext_resolve",
    "ownershipPolicy_apply",
    "destinationDir_create",
]

logger = logging.getLogger(__name__)


def binaryPath_resolve() -> str:
    """
    Locate the connector executable on the search path.

    Returns:
        Absolute path to the connector binary.

    Raises:
        ResolutionError:
            Raised when the binary is not installed.
    """
    binary: str = settings.config.connector.binary
    path: str | None = shutil.which(binary)
    if path is None:
        raise ResolutionError(f"Connector binary not found on PATH: {binary}")
    return os.path.abspath(path)


def destinationDir_resolve(scope: Scope, username: str) -> Path:
    """
    Resolve the unit directory for `scope`.

    Args:
        scope:
            Deployment scope.
        username:
            Target user; only consulted for the user scope.

    Returns:
        Destination directory.

    Raises:
        ResolutionError:
            Raised when the user's home directory cannot be resolved.
    """
    if scope is Scope.SYSTEM:
        return Path(settings.config.units.system_dir)
    return Path(identity.homeDir_get(username)) / settings.USER_UNIT_SUBDIR


def executionContext_resolve(scope: Scope, username: str) -> ExecutionContext:
    """
    Build the execution context for supervisor calls in `scope`.

    Args:
        scope:
            Deployment scope.
        username:
            Target user; only consulted for the user scope.

    Returns:
        Root context for the system scope, impersonated context carrying
        `XDG_RUNTIME_DIR` and `DBUS_SESSION_BUS_ADDRESS` for the user scope.
    """
    if scope is Scope.SYSTEM:
        return ExecutionContext(identity=Identity.ROOT)

    uid: int
    uid, _ = identity.ids_get(username)
    runtime_dir: str = f"{settings.RUNTIME_DIR_ROOT}/{uid}"
    return ExecutionContext(
        identity=Identity.IMPERSONATED,
        username=username,
        env={
            "XDG_RUNTIME_DIR": runtime_dir,
            "DBUS_SESSION_BUS_ADDRESS": f"unix:path={runtime_dir}/bus",
        },
    )


def destinationDir_create(destination: Path) -> list[Path]:
    """
    Create `destination` and any missing parents.

    Returns:
        Directories that did not exist before, outermost first.
    """
    missing: list[Path] = []
    current: Path = destination
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent
    destination.mkdir(parents=True, exist_ok=True)
    return list(reversed(missing))


def ownershipPolicy_apply(
    scope: Scope,
    username: str,
    destination: Path,
    created_dirs: list[Path] | None = None,
) -> None:
    """
    Apply the scope's ownership policy after unit files are written.

    System scope leaves ownership alone. User scope hands the destination
    directory, everything inside it, and any parents the installer created
    to the target user and their primary group. Links are chowned
    themselves, never their targets.

    Args:
        scope:
            Deployment scope.
        username:
            Target user.
        destination:
            Destination directory.
        created_dirs:
            Directories created by the installer on the way to `destination`.
    """
    if scope is Scope.SYSTEM:
        return

    uid: int
    gid: int
    uid, gid = identity.ids_get(username)
    targets: list[Path] = [path for path in (created_dirs or []) if path != destination]
    targets.append(destination)
    for root, dirnames, filenames in os.walk(destination):
        for name in dirnames + filenames:
            targets.append(Path(root) / name)

    for target in targets:
        logger.debug(f"chown {uid}:{gid} {target}")
        os.chown(target, uid, gid, follow_symlinks=False)
