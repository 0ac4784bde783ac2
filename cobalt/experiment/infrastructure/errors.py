"""Error types raised during experiment pre-flight."""

from cobalt.core.errors import ConfigurationError


class EmptyDatasetError(ConfigurationError):
    """Raised when an experiment is started with no items."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Failed to start experiment '{name}': dataset is empty")


class UnknownEvaluatorTypeError(ConfigurationError):
    """Raised when evaluators reference types missing from the registry."""

    def __init__(self, evaluator_types: list[str]) -> None:
        self.evaluator_types = evaluator_types
        type_list = ", ".join(sorted(evaluator_types))
        super().__init__(
            f"Failed to start experiment: unknown evaluator types: {type_list}"
        )


class DuplicateEvaluatorNameError(ConfigurationError):
    """Raised when two evaluators share a name, which would collide in results."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        name_list = ", ".join(sorted(names))
        super().__init__(
            f"Failed to start experiment: duplicate evaluator names: {name_list}"
        )
