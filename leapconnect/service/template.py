"""Unit template loading and placeholder rendering"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping, Optional

from leapconnect.common.errors import TemplateError
from leapconnect.common.types import Scope

__all__ = [
    "BINARY_PATH",
    "SERVER_ADDRESS",
    "USERNAME_TOKEN",
    "PACKAGED_TEMPLATES_DIR",
    "render",
    "templateText_load",
]

BINARY_PATH = "@BINARY_PATH@"
SERVER_ADDRESS = "@SERVER_ADDRESS@"
USERNAME_TOKEN = "@USERNAME@"

PACKAGED_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "units"


def render(template_text: str, bindings: Mapping[str, str]) -> str:
    """
    Substitute every bound placeholder token in `template_text`.

    Substitution is a single left-to-right pass over the source text, so a
    bound value that itself contains a token is emitted literally. Tokens
    with no binding are left untouched.

    Args:
        template_text:
            Template source.
        bindings:
            Token to replacement value.

    Returns:
        Rendered text.
    """
    if not bindings:
        return template_text
    tokens: list[str] = sorted(bindings, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    return pattern.sub(lambda match: bindings[match.group(0)], template_text)


def templateText_load(scope: Scope, name: str, templates_dir: Optional[str] = None) -> str:
    """
    Read the template source for unit `name` in `scope`.

    Args:
        scope:
            Deployment scope, selects the `system` or `user` subdirectory.
        name:
            Unit file name.
        templates_dir:
            Optional override of the packaged templates root.

    Returns:
        Template text.

    Raises:
        TemplateError:
            Raised when the template cannot be read.
    """
    root: Path = Path(templates_dir) if templates_dir else PACKAGED_TEMPLATES_DIR
    path: Path = root / scope.value / name
    try:
        return path.read_text()
    except OSError as exc:
        raise TemplateError(f"Template not available: {path} ({exc.strerror or exc})") from exc
