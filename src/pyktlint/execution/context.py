# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-build state shared by every task."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..change_filter import ChangeFilter
from ..config.models import KtlintConfig
from ..engine.base import EngineOptions, LintEngine
from ..errors import KtlintError
from ..sources import SourceSetResolver
from ..versioning import ResolvedKtlint

if TYPE_CHECKING:
    from .executor import IncrementalExecutor


@dataclass(slots=True)
class BuildContext:
    """Everything a task needs to run within one build invocation.

    ``ktlint`` and ``ktlint_error`` are mutually exclusive: version resolution
    happens once per project and a failure is deferred until a task actually
    needs the engine.
    """

    project_root: Path
    config: KtlintConfig
    resolver: SourceSetResolver
    change_filter: ChangeFilter
    engine: LintEngine
    executor: IncrementalExecutor
    ktlint: ResolvedKtlint | None = None
    ktlint_error: KtlintError | None = None
    restriction: frozenset[str] | None = None

    @property
    def build_dir(self) -> Path:
        build_dir = self.config.build_dir
        return build_dir if build_dir.is_absolute() else self.project_root / build_dir

    def engine_options(self) -> EngineOptions:
        """Return engine options for the resolved ktlint.

        Raises:
            KtlintError: The deferred version resolution failure, if any.
        """

        if self.ktlint_error is not None:
            raise self.ktlint_error
        if self.ktlint is None:
            raise KtlintError("ktlint version has not been resolved")
        return EngineOptions(
            ktlint=self.ktlint,
            android=self.config.android,
            verbose=self.config.verbose,
            debug=self.config.debug,
        )

    def config_snapshot(self) -> Mapping[str, Any]:
        """Return the settings that invalidate previous task results when changed."""

        options = self.engine_options()
        return {
            "coordinates": str(options.ktlint.coordinates),
            "android": options.android,
            "experimental_rules": options.experimental_rules,
            "disabled_rules": sorted(options.disabled_rules),
            "ignore_failures": self.config.ignore_failures,
            "reporters": [reporter.value for reporter in self.config.reporters],
        }


__all__ = ["BuildContext"]
