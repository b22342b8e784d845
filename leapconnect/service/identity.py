"""OS identity database lookups (username, home directory, numeric ids)"""

from __future__ import annotations

import pwd

from leapconnect.common.errors import ResolutionError

__all__ = ["principal_lookup", "principal_exists", "homeDir_get", "ids_get"]


def principal_lookup(username: str) -> pwd.struct_passwd:
    """
    Look up a principal in the identity database.

    Args:
        username:
            Login name.

    Returns:
        Password database entry.

    Raises:
        ResolutionError:
            Raised when no such principal exists.
    """
    try:
        return pwd.getpwnam(username)
    except KeyError as exc:
        raise ResolutionError(f"User does not exist: {username}") from exc


def principal_exists(username: str) -> bool:
    """Check if the identity database knows `username`"""
    try:
        principal_lookup(username)
    except ResolutionError:
        return False
    return True


def homeDir_get(username: str) -> str:
    """
    Resolve the home directory of `username`.

    Raises:
        ResolutionError:
            Raised when the user is unknown or has no home directory.
    """
    home: str = principal_lookup(username).pw_dir
    if not home:
        raise ResolutionError(f"User has no home directory: {username}")
    return home


def ids_get(username: str) -> tuple[int, int]:
    """Return `(uid, gid)` of `username`, primary group for gid"""
    entry = principal_lookup(username)
    return entry.pw_uid, entry.pw_gid
