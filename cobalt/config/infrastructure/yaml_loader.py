"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cobalt.config.domain.config import CobaltConfig
from cobalt.config.domain.observer import ConfigObserver
from cobalt.config.infrastructure.env_interpolation import interpolate_env
from cobalt.config.infrastructure.errors import ConfigLoadError, ConfigValidationError


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a CobaltConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> CobaltConfig:
        """
        Load, interpolate, validate, and return a CobaltConfig from a YAML file.

        An empty file yields the defaults.

        Raises:
            ConfigLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        interpolated = interpolate_env(raw)
        cfg = _build_config(raw=interpolated)
        if cfg.judge.temperature > 0.0:
            self._observer.config_judge_temperature_warning(cfg.judge.temperature)
        self._observer.config_loaded(
            path=str(path),
            judge_model=cfg.judge.model,
            concurrency=cfg.concurrency,
            plugins=len(cfg.plugins),
        )
        return cfg


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigLoadError(path=path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc
    return raw if raw is not None else {}


def _build_config(raw: Any) -> CobaltConfig:
    if not isinstance(raw, dict):
        raise ConfigValidationError("top level must be a mapping")
    try:
        return CobaltConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
