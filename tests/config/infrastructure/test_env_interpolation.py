"""Tests for ${ENV_VAR} interpolation."""

import pytest

from cobalt.config.infrastructure.env_interpolation import (
    find_missing_env_vars,
    interpolate_env,
)
from cobalt.config.infrastructure.errors import MissingEnvVarsError


class TestInterpolateEnv:
    def test_substitutes_nested_strings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MODEL", "gpt-4o")

        data = {"judge": {"model": "${MODEL}"}, "plugins": ["x-${MODEL}"]}

        assert interpolate_env(data) == {
            "judge": {"model": "gpt-4o"},
            "plugins": ["x-gpt-4o"],
        }

    def test_default_applies_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OUT_DIR", raising=False)

        assert interpolate_env("${OUT_DIR:-.cobalt}") == ".cobalt"

    def test_empty_default_is_allowed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SUFFIX", raising=False)

        assert interpolate_env("name${SUFFIX:-}") == "name"

    def test_non_strings_pass_through(self) -> None:
        assert interpolate_env({"n": 5, "flag": True, "none": None}) == {
            "n": 5,
            "flag": True,
            "none": None,
        }

    def test_input_is_not_mutated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("A", "1")
        data = {"a": "${A}"}

        interpolate_env(data)

        assert data == {"a": "${A}"}

    def test_missing_vars_raise_with_all_names(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("ONE", raising=False)
        monkeypatch.delenv("TWO", raising=False)

        with pytest.raises(MissingEnvVarsError) as exc_info:
            interpolate_env(["${TWO}", "${ONE}", "${TWO}"])

        assert exc_info.value.missing_vars == ["TWO", "ONE"]
        assert "ONE, TWO" in str(exc_info.value)


class TestFindMissingEnvVars:
    def test_set_and_defaulted_vars_are_not_missing(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SET", "x")
        monkeypatch.delenv("UNSET", raising=False)

        assert find_missing_env_vars(["${SET}", "${UNSET:-d}", "${UNSET}"]) == ["UNSET"]
