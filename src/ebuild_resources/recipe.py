"""Rendering serialized resource sets as ebuild variable assignments."""

from __future__ import annotations

import re
from collections.abc import Iterable

DEFAULT_VARIABLE = "JAVA_RESOURCE_DIRS"

# Bash variable names are ASCII only.
_VARIABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Characters that keep their special meaning inside bash double quotes.
_BASH_DQUOTE_SPECIALS = str.maketrans({"\\": "\\\\", '"': '\\"', "$": "\\$", "`": "\\`"})


def quote_value(value: str) -> str:
    """Wrap a value in double quotes, escaping what bash would expand."""
    return '"' + value.translate(_BASH_DQUOTE_SPECIALS) + '"'


def render_resource_dirs(values: Iterable[str | None], variable: str = DEFAULT_VARIABLE) -> str:
    """
    Render serialized resource sets as a bash array assignment, e.g.
    `JAVA_RESOURCE_DIRS=( "src/main/resources" "res:META-INF" )`.

    `None` entries (resource sets without a valid origin) are skipped.
    """
    if not _VARIABLE_NAME.fullmatch(variable):
        raise ValueError(f"Invalid variable name: {variable!r}")
    quoted = [quote_value(v) for v in values if v is not None]
    if not quoted:
        return f"{variable}=()"
    return f"{variable}=( {' '.join(quoted)} )"
