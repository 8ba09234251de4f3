# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project model tying configuration, version resolution and the task graph together."""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .change_filter import ChangeFilter
from .config.loader import load_config
from .config.models import KtlintConfig, SourceSetConfig
from .engine.artifacts import DEFAULT_CACHE_DIR, resolve_executable
from .engine.base import LintEngine
from .engine.cli import KtlintCliEngine
from .errors import KtlintError
from .execution.context import BuildContext
from .execution.executor import IncrementalExecutor
from .execution.runner import BuildResult, BuildRunner
from .sources import FileTree, PatternFilter, SourceCategory, SourceRoot, SourceSetResolver
from .tasks.graph import TaskGraph, TaskGraphBuilder
from .versioning import KtlintVersion, ResolvedKtlint, VersionPolicy

LOGGER = logging.getLogger(__name__)

KTLINT_CONFIGURATION_NAME = "ktlint"
KTLINT_CONFIGURATION_DESCRIPTION = "Main ktlint-gradle configuration"


class Project:
    """Configured Kotlin project exposing ktlint tasks.

    Version resolution happens once here. A failure is kept rather than
    raised so listings still work; tasks needing the engine fail with it.
    """

    def __init__(
        self,
        root: Path,
        config: KtlintConfig,
        *,
        policy: VersionPolicy | None = None,
        cache_dir: Path = DEFAULT_CACHE_DIR,
    ) -> None:
        self._root = root.resolve()
        self._config = config
        self._policy = policy or VersionPolicy()
        self._cache_dir = cache_dir
        self._ktlint: ResolvedKtlint | None = None
        self._ktlint_error: KtlintError | None = None
        self._resolve_version()
        self._graph = self._build_graph()

    @classmethod
    def load(
        cls,
        root: Path,
        *,
        overrides: Mapping[str, Any] | None = None,
        policy: VersionPolicy | None = None,
    ) -> Project:
        """Load configuration for ``root`` and configure the project.

        Raises:
            ConfigError: If the configuration files are invalid.
        """

        return cls(root, load_config(root, overrides=overrides), policy=policy)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config(self) -> KtlintConfig:
        return self._config

    @property
    def graph(self) -> TaskGraph:
        return self._graph

    @property
    def ktlint(self) -> ResolvedKtlint | None:
        return self._ktlint

    @property
    def ktlint_error(self) -> KtlintError | None:
        return self._ktlint_error

    @property
    def build_dir(self) -> Path:
        build_dir = self._config.build_dir
        return build_dir if build_dir.is_absolute() else self._root / build_dir

    def source_roots(self) -> tuple[SourceRoot, ...]:
        """Return one source-category root per configured source set."""

        return tuple(
            SourceRoot(name=name, directories=source_set.src_dirs, category=SourceCategory.SOURCE)
            for name, source_set in self._config.source_sets.items()
        )

    def add_source_set(self, name: str, src_dirs: Sequence[Path]) -> None:
        """Register another source set and rebuild the task graph.

        Args:
            name: Source set name, used in the leaf task names.
            src_dirs: Directories relative to the project root, or absolute.

        Raises:
            ValueError: If a source set called ``name`` already exists.
        """

        if name in self._config.source_sets:
            raise ValueError(f"source set '{name}' already exists")
        source_sets = dict(self._config.source_sets)
        source_sets[name] = SourceSetConfig(src_dirs=tuple(src_dirs))
        self._config.source_sets = source_sets
        self._graph = self._build_graph()

    def dependencies(self) -> list[str]:
        """Return the resolved ktlint artifact coordinates of the ``ktlint`` configuration."""

        if self._ktlint is not None:
            return [str(self._ktlint.coordinates)]
        try:
            version = KtlintVersion.parse(self._config.version)
        except ValueError:
            return []
        return [str(self._policy.coordinates(version))]

    def default_engine(self) -> LintEngine:
        """Return an engine running the ktlint executable for the resolved version."""

        resolver = functools.partial(
            resolve_executable,
            cache_dir=self._cache_dir,
            executable=self._config.executable,
        )
        return KtlintCliEngine(resolver, cwd=self._root)

    def context(
        self,
        *,
        engine: LintEngine | None = None,
        restriction: frozenset[str] | None = None,
    ) -> BuildContext:
        """Return the per-build state for a run of this project."""

        return BuildContext(
            project_root=self._root,
            config=self._config,
            resolver=SourceSetResolver(self._root),
            change_filter=ChangeFilter(self._root),
            engine=engine if engine is not None else self.default_engine(),
            executor=IncrementalExecutor(self.build_dir),
            ktlint=self._ktlint,
            ktlint_error=self._ktlint_error,
            restriction=restriction,
        )

    def run(
        self,
        task_names: Sequence[str],
        *,
        engine: LintEngine | None = None,
        restriction: frozenset[str] | None = None,
    ) -> BuildResult:
        """Run ``task_names`` and their dependencies.

        Raises:
            TaskNotFoundError: If a task name is not registered.
        """

        context = self.context(engine=engine, restriction=restriction)
        return BuildRunner(self._graph, context, jobs=self._config.jobs).run(task_names)

    def _resolve_version(self) -> None:
        try:
            self._ktlint = self._policy.resolve(
                self._config.version,
                experimental_rules=self._config.enable_experimental_rules,
                disabled_rules=self._config.disabled_rules,
            )
        except KtlintError as exc:
            LOGGER.debug("ktlint version resolution failed: %s", exc)
            self._ktlint_error = exc

    def _build_graph(self) -> TaskGraph:
        filter_config = self._config.filter
        builder = TaskGraphBuilder(
            pattern_filter=PatternFilter(excludes=filter_config.exclude, includes=filter_config.include),
            script_paths=tuple(
                FileTree(directory=tree.dir, includes=tree.include, excludes=tree.exclude)
                for tree in self._config.kotlin_script_additional_paths
            ),
        )
        return builder.build(self.source_roots())


__all__ = ["KTLINT_CONFIGURATION_DESCRIPTION", "KTLINT_CONFIGURATION_NAME", "Project"]
