"""``${ENV_VAR}`` and ``${ENV_VAR:-default}`` substitution over raw YAML data."""

import os
import re
from collections.abc import Callable
from typing import Any

from cobalt.config.infrastructure.errors import MissingEnvVarsError

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def _map_strings(data: Any, fn: Callable[[str], str]) -> Any:
    if isinstance(data, str):
        return fn(data)
    if isinstance(data, list):
        return [_map_strings(item, fn) for item in data]
    if isinstance(data, dict):
        return {key: _map_strings(value, fn) for key, value in data.items()}
    return data


def find_missing_env_vars(data: Any) -> list[str]:
    """Return every referenced variable that is unset and has no default, in first-seen order."""
    missing: list[str] = []

    def _record(text: str) -> str:
        for match in _ENV_REF.finditer(text):
            name, default = match.group(1), match.group(2)
            if default is None and name not in os.environ and name not in missing:
                missing.append(name)
        return text

    _map_strings(data, _record)
    return missing


def interpolate_env(data: Any) -> Any:
    """Return a copy of data with every env reference substituted.

    Raises:
        MissingEnvVarsError: listing all unset variables without a default.
    """
    missing = find_missing_env_vars(data)
    if missing:
        raise MissingEnvVarsError(missing_vars=missing)

    def _substitute(match: re.Match[str]) -> str:
        name, default = match.group(1), match.group(2)
        return os.environ.get(name, default if default is not None else "")

    return _map_strings(data, lambda text: _ENV_REF.sub(_substitute, text))
