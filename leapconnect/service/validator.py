"""
Username and server-address validation.

Address validation is pure. Username validation consults the OS identity
database but never mutates anything.
"""

from __future__ import annotations

import re

from leapconnect.common.errors import ValidationError
from leapconnect.common.types import ServerAddress
from leapconnect.service import identity

__all__ = ["address_validate", "username_validate"]

DOTTED_QUAD_PATTERN = re.compile(r"[0-9]+(\.[0-9]+){3}")
HOSTNAME_PATTERN = re.compile(r"[A-Za-z0-9]([A-Za-z0-9.-]*[A-Za-z0-9])?")
PORT_MIN = 1
PORT_MAX = 65535
OCTET_MAX = 255


def address_validate(address: str) -> ServerAddress:
    """
    Validate a `host[:port]` server address.

    The port is split off at the last colon. A host that looks like a
    dotted quad must have every component in [0, 255]; any other host must
    match the hostname grammar.

    Args:
        address:
            Raw server address.

    Returns:
        Decomposed server address.

    Raises:
        ValidationError:
            Raised for an empty address, bad port, bad octet or bad hostname.
    """
    if not address:
        raise ValidationError("Server address cannot be empty")

    host: str = address
    port: int | None = None
    if ":" in address:
        host, port_str = address.rsplit(":", 1)
        if not port_str.isascii() or not port_str.isdigit():
            raise ValidationError(f"Invalid port: {port_str!r} in {address}")
        port = int(port_str)
        if not PORT_MIN <= port <= PORT_MAX:
            raise ValidationError(f"Port out of range {PORT_MIN}-{PORT_MAX}: {port}")

    if DOTTED_QUAD_PATTERN.fullmatch(host):
        for octet in host.split("."):
            if int(octet) > OCTET_MAX:
                raise ValidationError(f"Invalid IP address octet {octet} in {host}")
        return ServerAddress(host=host, port=port)

    if not host.isascii() or not HOSTNAME_PATTERN.fullmatch(host):
        raise ValidationError(f"Invalid server address format: {address}")
    return ServerAddress(host=host, port=port)


def username_validate(username: str) -> str:
    """
    Validate that `username` names an existing principal.

    Raises:
        ValidationError:
            Raised when the name is empty or unknown to the identity database.
    """
    if not username:
        raise ValidationError("Username cannot be empty")
    if not identity.principal_exists(username):
        raise ValidationError(f"User does not exist: {username}")
    return username
