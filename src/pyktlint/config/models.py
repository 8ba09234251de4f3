# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pydantic models describing the ktlint plugin configuration surface."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_KTLINT_VERSION: Final[str] = "0.32.0"
DEFAULT_BUILD_DIR: Final[str] = "build"


class ConfigError(Exception):
    """Raised when configuration files are malformed or contain invalid values."""


class ReporterType(str, Enum):
    """Report formats written for every leaf task."""

    PLAIN = "plain"
    PLAIN_GROUP_BY_FILE = "plain_group_by_file"
    CHECKSTYLE = "checkstyle"
    JSON = "json"

    @property
    def extension(self) -> str:
        """Return the file extension used for reports of this type."""

        return _REPORT_EXTENSIONS[self]


_REPORT_EXTENSIONS: Final[dict[ReporterType, str]] = {
    ReporterType.PLAIN: "txt",
    ReporterType.PLAIN_GROUP_BY_FILE: "txt",
    ReporterType.CHECKSTYLE: "xml",
    ReporterType.JSON: "json",
}


def _default_parallel_jobs() -> int:
    cpu_count = os.cpu_count() or 1
    return max(1, min(8, cpu_count))


class FilterConfig(BaseModel):
    """Ant-style include/exclude patterns applied to every source file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    exclude: tuple[str, ...] = ()
    include: tuple[str, ...] = ()

    @field_validator("exclude", "include", mode="before")
    @classmethod
    def _coerce_patterns(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        return value


class FileTreeConfig(BaseModel):
    """Directory tree registered as an additional Kotlin script location."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    dir: Path
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


class SourceSetConfig(BaseModel):
    """Named group of Kotlin source directories."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    src_dirs: tuple[Path, ...] = ()


def _default_source_sets() -> dict[str, SourceSetConfig]:
    return {
        "main": SourceSetConfig(src_dirs=(Path("src/main/kotlin"), Path("src/main/java"))),
        "test": SourceSetConfig(src_dirs=(Path("src/test/kotlin"), Path("src/test/java"))),
    }


class KtlintConfig(BaseModel):
    """Primary configuration container consumed by :mod:`pyktlint.project`."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    version: str = DEFAULT_KTLINT_VERSION
    enable_experimental_rules: bool = False
    disabled_rules: tuple[str, ...] = ()
    android: bool = False
    verbose: bool = False
    debug: bool = False
    output_to_console: bool = True
    ignore_failures: bool = False
    reporters: tuple[ReporterType, ...] = (ReporterType.PLAIN,)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    kotlin_script_additional_paths: tuple[FileTreeConfig, ...] = ()
    source_sets: dict[str, SourceSetConfig] = Field(default_factory=_default_source_sets)
    build_dir: Path = Path(DEFAULT_BUILD_DIR)
    jobs: int = Field(default_factory=_default_parallel_jobs, ge=1)
    executable: Path | None = None

    @field_validator("version")
    @classmethod
    def _strip_version(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("version must not be empty")
        return stripped

    @field_validator("source_sets")
    @classmethod
    def _validate_source_set_names(cls, value: dict[str, SourceSetConfig]) -> dict[str, SourceSetConfig]:
        for name in value:
            if not name or not name.replace("_", "").replace("-", "").isalnum():
                raise ValueError(f"invalid source set name '{name}'")
        return value


__all__ = [
    "ConfigError",
    "DEFAULT_BUILD_DIR",
    "DEFAULT_KTLINT_VERSION",
    "FileTreeConfig",
    "FilterConfig",
    "KtlintConfig",
    "ReporterType",
    "SourceSetConfig",
]
