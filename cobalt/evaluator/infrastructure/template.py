"""Prompt templating with ``{{path}}`` placeholders."""

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any

_PLACEHOLDER = re.compile(r"\{\{([\w.\[\]]+)\}\}")
_INDEX = re.compile(r"\[(\d+)\]")
_MISSING = object()


def _resolve(context: Mapping[str, Any], path: str) -> Any:
    current: Any = context
    for segment in _INDEX.sub(r".\1", path).split("."):
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif (
            isinstance(current, Sequence)
            and not isinstance(current, str)
            and segment.isdigit()
            and int(segment) < len(current)
        ):
            current = current[int(segment)]
        else:
            return _MISSING
        if current is _MISSING or current is None:
            return _MISSING
    return current


def render_template(template: str, context: Mapping[str, Any]) -> str:
    """Substitute ``{{name}}``, ``{{a.b}}`` and ``{{tags[0]}}`` placeholders.

    Placeholders that do not resolve are left in place. Mappings and lists
    render as indented JSON.
    """

    def _substitute(match: re.Match[str]) -> str:
        value = _resolve(context, match.group(1))
        if value is _MISSING:
            return match.group(0)
        if isinstance(value, (Mapping, list, tuple)):
            return json.dumps(value, indent=2, default=str)
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    return _PLACEHOLDER.sub(_substitute, template)
