# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Task nodes and the builder wiring them into a graph."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ..execution.models import TaskOutcome, TaskResult
from ..sources import FileTree, PatternFilter, SourceCategory, SourceRoot
from .naming import (
    KOTLIN_SCRIPT_ROOT,
    AggregateKey,
    LeafKey,
    MetaKey,
    MetaTask,
    TaskKey,
    TaskKind,
    task_name,
)

if TYPE_CHECKING:
    from ..execution.context import BuildContext

VERIFICATION_GROUP: Final[str] = "Verification"
FORMATTING_GROUP: Final[str] = "Formatting"
HELP_GROUP: Final[str] = "Help"


@dataclass(eq=False)
class Task(ABC):
    """Node in the task graph.

    Tasks without a ``group`` are only shown by ``tasks --all``.
    ``depends_on`` edges pull tasks into a build; ``must_run_after`` edges only
    order tasks that were both requested.
    """

    key: TaskKey
    description: str
    group: str | None = None
    depends_on: list[str] = field(default_factory=list)
    must_run_after: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return task_name(self.key)

    @abstractmethod
    def execute(self, context: BuildContext, dependencies: Sequence[TaskResult]) -> TaskResult:
        """Run the task and return its result."""


@dataclass(eq=False)
class LintTask(Task):
    """Leaf task checking or formatting the files of one source root."""

    key: LeafKey = field(kw_only=True)
    roots: tuple[SourceRoot, ...] = field(default=(), kw_only=True)
    extra_paths: tuple[FileTree, ...] = field(default=(), kw_only=True)
    pattern_filter: PatternFilter = field(default_factory=PatternFilter, kw_only=True)

    @property
    def kind(self) -> TaskKind:
        return self.key.kind

    @property
    def category(self) -> SourceCategory:
        return self.key.category

    def input_files(self, context: BuildContext) -> tuple[Path, ...]:
        """Return the files this task should process in ``context``."""

        candidates = context.resolver.resolve(
            self.roots,
            self.extra_paths,
            category=self.category,
            pattern_filter=self.pattern_filter,
        )
        return context.change_filter.apply(candidates, context.restriction)

    def execute(self, context: BuildContext, dependencies: Sequence[TaskResult]) -> TaskResult:
        return context.executor.execute(self, context)


@dataclass(eq=False)
class AggregateTask(Task):
    """Task with no inputs of its own that summarises its dependencies."""

    key: AggregateKey = field(kw_only=True)

    def execute(self, context: BuildContext, dependencies: Sequence[TaskResult]) -> TaskResult:
        outcomes = {result.outcome for result in dependencies}
        if TaskOutcome.FAILED in outcomes:
            outcome = TaskOutcome.FAILED
        elif TaskOutcome.SUCCESS in outcomes:
            outcome = TaskOutcome.SUCCESS
        else:
            outcome = TaskOutcome.UP_TO_DATE
        return TaskResult(name=self.name, outcome=outcome)


@dataclass(eq=False)
class ApplyToIdeaTask(Task):
    """Export the ktlint code style into IntelliJ IDEA settings."""

    key: MetaKey = field(kw_only=True)

    @property
    def globally(self) -> bool:
        return self.key.task is MetaTask.APPLY_TO_IDEA_GLOBALLY

    def execute(self, context: BuildContext, dependencies: Sequence[TaskResult]) -> TaskResult:
        context.engine.apply_to_idea(context.project_root, context.engine_options(), globally=self.globally)
        return TaskResult(name=self.name, outcome=TaskOutcome.SUCCESS)


class TaskGraph:
    """Ordered, name-indexed collection of tasks."""

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def add(self, task: Task) -> Task:
        """Register ``task``; names must be unique.

        Raises:
            ValueError: If a task with the same name already exists.
        """

        if task.name in self._tasks:
            raise ValueError(f"task '{task.name}' is already registered")
        self._tasks[task.name] = task
        return task

    def get(self, name: str) -> Task | None:
        return self._tasks.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def listing(self, *, show_all: bool = False) -> list[Task]:
        """Return tasks sorted by name, hiding ungrouped ones unless ``show_all``."""

        visible = [task for task in self._tasks.values() if show_all or task.group is not None]
        return sorted(visible, key=lambda task: task.name)

    def leaves(self, kind: TaskKind | None = None) -> list[LintTask]:
        """Return leaf tasks, optionally restricted to ``kind``."""

        return [
            task
            for task in self._tasks.values()
            if isinstance(task, LintTask) and (kind is None or task.kind is kind)
        ]


_LEAF_DESCRIPTIONS: Final[dict[tuple[TaskKind, SourceCategory], str]] = {
    (TaskKind.CHECK, SourceCategory.SOURCE): "Runs a check against all .kt files in the {root} source set.",
    (TaskKind.FORMAT, SourceCategory.SOURCE): "Formats all .kt files in the {root} source set.",
    (TaskKind.CHECK, SourceCategory.SCRIPT): "Runs a check against all .kts files in the project directory.",
    (TaskKind.FORMAT, SourceCategory.SCRIPT): "Formats all .kts files in the project directory.",
}


@dataclass(frozen=True, slots=True)
class TaskGraphBuilder:
    """Materialise leaf, aggregate and editor tasks for a set of source roots."""

    pattern_filter: PatternFilter = PatternFilter()
    script_paths: tuple[FileTree, ...] = ()

    def build(self, source_roots: Sequence[SourceRoot]) -> TaskGraph:
        """Return a graph with one leaf per (root, kind, category).

        Args:
            source_roots: Source-category roots, one per source set.

        Returns:
            TaskGraph: Graph containing leaves, both aggregates and the editor tasks.
        """

        graph = TaskGraph()
        script_root = SourceRoot(
            name=KOTLIN_SCRIPT_ROOT,
            directories=(Path(),),
            category=SourceCategory.SCRIPT,
            recursive=False,
        )
        for kind in (TaskKind.FORMAT, TaskKind.CHECK):
            leaf_names: list[str] = []
            for root in (*source_roots, script_root):
                leaf = graph.add(self._leaf(root, kind))
                leaf_names.append(leaf.name)
            graph.add(
                AggregateTask(
                    key=AggregateKey(kind),
                    description=(
                        "Runs ktlint on all kotlin sources in this project."
                        if kind is TaskKind.CHECK
                        else "Formats all kotlin sources in this project with ktlint."
                    ),
                    group=VERIFICATION_GROUP if kind is TaskKind.CHECK else FORMATTING_GROUP,
                    depends_on=leaf_names,
                ),
            )
        graph.add(
            ApplyToIdeaTask(
                key=MetaKey(MetaTask.APPLY_TO_IDEA),
                description="Generates IDEA built-in formatter rules and applies them to the project.",
                group=HELP_GROUP,
            ),
        )
        graph.add(
            ApplyToIdeaTask(
                key=MetaKey(MetaTask.APPLY_TO_IDEA_GLOBALLY),
                description="Generates IDEA built-in formatter rules and applies them globally.",
                group=HELP_GROUP,
            ),
        )
        return graph

    def _leaf(self, root: SourceRoot, kind: TaskKind) -> LintTask:
        key = LeafKey(root=root.name, kind=kind, category=root.category)
        must_run_after: list[str] = []
        if kind is TaskKind.CHECK:
            must_run_after.append(task_name(LeafKey(root=root.name, kind=TaskKind.FORMAT, category=root.category)))
        return LintTask(
            key=key,
            description=_LEAF_DESCRIPTIONS[(kind, root.category)].format(root=root.name),
            must_run_after=must_run_after,
            roots=(root,),
            extra_paths=self.script_paths if root.category is SourceCategory.SCRIPT else (),
            pattern_filter=self.pattern_filter,
        )


__all__ = [
    "AggregateTask",
    "ApplyToIdeaTask",
    "LintTask",
    "Task",
    "TaskGraph",
    "TaskGraphBuilder",
]
