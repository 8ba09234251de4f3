# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered configuration loading from defaults, ``pyproject.toml`` and ``.pyktlint.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import ValidationError

from .models import ConfigError, KtlintConfig

PROJECT_CONFIG_NAME: Final[str] = ".pyktlint.toml"
PYPROJECT_NAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "pyktlint"


class ConfigSource(Protocol):
    """Provide a configuration fragment merged by :class:`ConfigLoader`."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the raw configuration fragment, or an empty mapping."""
        ...


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return KtlintConfig().model_dump(mode="json", exclude_none=True)


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Configuration at {self._path} is not valid TOML: {exc}") from exc


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.pyktlint]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return section


class MappingConfigSource:
    """Wrap an in-memory mapping, typically command-line overrides."""

    def __init__(self, data: Mapping[str, Any], *, name: str = "overrides") -> None:
        self._data = data
        self.name = name

    def load(self) -> Mapping[str, Any]:
        return self._data


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, sources: Sequence[ConfigSource]) -> None:
        """Initialise a loader that merges ``sources`` in order.

        Args:
            sources: Ordered configuration sources; later entries win.

        Raises:
            ValueError: If ``sources`` is empty.
        """

        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)

    @classmethod
    def for_root(
        cls,
        project_root: Path,
        *,
        overrides: Mapping[str, Any] | None = None,
    ) -> ConfigLoader:
        """Build a loader reading the standard files under ``project_root``.

        Args:
            project_root: Project directory containing configuration files.
            overrides: Optional highest-precedence values.

        Returns:
            ConfigLoader: Loader with defaults, pyproject and project file sources.
        """

        root = project_root.resolve()
        sources: list[ConfigSource] = [
            DefaultConfigSource(),
            PyProjectConfigSource(root / PYPROJECT_NAME),
            TomlConfigSource(root / PROJECT_CONFIG_NAME),
        ]
        if overrides:
            sources.append(MappingConfigSource(overrides))
        return cls(sources)

    def load(self) -> KtlintConfig:
        """Return the merged and validated configuration.

        Returns:
            KtlintConfig: Validated configuration model.

        Raises:
            ConfigError: If a source is unreadable or the merged data is invalid.
        """

        merged: dict[str, Any] = {}
        origin = "defaults"
        for source in self._sources:
            fragment = source.load()
            if not fragment:
                continue
            merged = _deep_merge(merged, fragment)
            origin = source.name
        try:
            return KtlintConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid ktlint configuration (last source: {origin}): {exc}") from exc


def load_config(project_root: Path, *, overrides: Mapping[str, Any] | None = None) -> KtlintConfig:
    """Load the configuration for ``project_root`` using the default sources."""

    return ConfigLoader.for_root(project_root, overrides=overrides).load()


__all__ = [
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "MappingConfigSource",
    "PROJECT_CONFIG_NAME",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_config",
]
