"""Plugin loading — imports plugin modules and registers their evaluator types."""

import importlib
import importlib.util
from collections.abc import Sequence
from pathlib import Path
from types import ModuleType
from typing import Any

from pydantic import ValidationError

from cobalt.evaluator.domain.observer import EvaluatorObserver
from cobalt.evaluator.domain.plugin import PluginDefinition
from cobalt.evaluator.infrastructure.errors import PluginLoadError
from cobalt.evaluator.infrastructure.registry import EvaluatorRegistry

_DEFAULT_ATTRIBUTE = "plugin"


def _import_module(reference: str, module_ref: str) -> ModuleType:
    if module_ref.endswith(".py"):
        path = Path(module_ref).resolve()
        if not path.is_file():
            raise PluginLoadError(reference=reference, reason=f"file not found: {path}")
        spec = importlib.util.spec_from_file_location(f"cobalt_plugin_{path.stem}", path)
        if spec is None or spec.loader is None:
            raise PluginLoadError(reference=reference, reason="not an importable file")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    return importlib.import_module(module_ref)


def load_plugin(reference: str) -> PluginDefinition:
    """Import and validate one plugin.

    ``reference`` is ``"package.module"``, ``"package.module:attribute"`` or a
    path to a ``.py`` file. Without an attribute, the module's ``plugin``
    attribute is used.

    Raises:
        PluginLoadError: if the module cannot be imported or does not define
            a valid PluginDefinition.
    """
    module_ref, _, attribute = reference.partition(":")
    try:
        module = _import_module(reference, module_ref)
    except PluginLoadError:
        raise
    except Exception as exc:
        raise PluginLoadError(reference=reference, reason=str(exc)) from exc

    target: Any = getattr(module, attribute or _DEFAULT_ATTRIBUTE, None)
    if target is None:
        raise PluginLoadError(
            reference=reference,
            reason=f"module has no attribute '{attribute or _DEFAULT_ATTRIBUTE}'",
        )
    if isinstance(target, PluginDefinition):
        return target
    try:
        return PluginDefinition.model_validate(target)
    except ValidationError as exc:
        raise PluginLoadError(reference=reference, reason=str(exc)) from exc


def load_plugins(
    references: Sequence[str],
    registry: EvaluatorRegistry,
    observer: EvaluatorObserver,
) -> list[PluginDefinition]:
    """Load every plugin and register its evaluator types.

    A plugin that fails to load is skipped and reported through the observer;
    experiment pre-flight reports any evaluator type still missing afterwards.
    """
    loaded: list[PluginDefinition] = []
    for reference in references:
        try:
            plugin = load_plugin(reference)
        except PluginLoadError as exc:
            observer.plugin_load_failed(reference=reference, reason=exc.reason)
            continue

        for evaluator in plugin.evaluators:
            registry.register(evaluator.type, evaluator.evaluate)
        observer.plugin_loaded(
            name=plugin.name,
            version=plugin.version,
            evaluator_types=[evaluator.type for evaluator in plugin.evaluators],
        )
        loaded.append(plugin)
    return loaded
