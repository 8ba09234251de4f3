# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Schedule requested tasks and their dependencies onto a worker pool."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import KtlintError, TaskNotFoundError
from .models import TaskOutcome, TaskResult

if TYPE_CHECKING:
    from ..tasks.graph import Task, TaskGraph
    from .context import BuildContext

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildResult:
    """Results of one build keyed by task name in completion order."""

    results: dict[str, TaskResult] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return any(result.failed for result in self.results.values())

    def outcome(self, name: str) -> TaskOutcome | None:
        result = self.results.get(name)
        return None if result is None else result.outcome

    def diagnostics(self) -> list[TaskResult]:
        """Return results that carry diagnostics, in completion order."""

        return [result for result in self.results.values() if result.diagnostics]


class BuildRunner:
    """Execute tasks from a :class:`TaskGraph` honouring ordering edges.

    Every task runs at most once per build. Independent tasks run concurrently
    on up to ``jobs`` worker threads.
    """

    def __init__(self, graph: TaskGraph, context: BuildContext, *, jobs: int = 1) -> None:
        self._graph = graph
        self._context = context
        self._jobs = max(1, jobs)

    def plan(self, names: Iterable[str]) -> list[Task]:
        """Return the requested tasks plus their transitive dependencies.

        Raises:
            TaskNotFoundError: If a requested name is not registered.
        """

        selected: dict[str, Task] = {}
        pending = list(names)
        while pending:
            name = pending.pop()
            if name in selected:
                continue
            task = self._graph.get(name)
            if task is None:
                raise TaskNotFoundError(name)
            selected[name] = task
            pending.extend(task.depends_on)
        return [task for task in self._graph if task.name in selected]

    def run(self, names: Sequence[str]) -> BuildResult:
        """Execute ``names`` and everything they depend on.

        Args:
            names: Task names requested by the caller.

        Returns:
            BuildResult: One result per executed task.

        Raises:
            TaskNotFoundError: If a requested name is not registered.
            KtlintError: If the ordering edges form a cycle.
        """

        tasks = {task.name: task for task in self.plan(names)}
        waiting_on = {
            name: {
                other
                for other in (*task.depends_on, *task.must_run_after)
                if other in tasks and other != name
            }
            for name, task in tasks.items()
        }
        build = BuildResult()
        running: dict[Future[TaskResult], str] = {}
        with ThreadPoolExecutor(max_workers=self._jobs, thread_name_prefix="pyktlint") as pool:
            while waiting_on or running:
                ready = sorted(name for name, blockers in waiting_on.items() if not blockers)
                for name in ready:
                    del waiting_on[name]
                    task = tasks[name]
                    dependencies = [build.results[dep] for dep in task.depends_on]
                    running[pool.submit(self._execute, task, dependencies)] = name
                if not running:
                    cycle = ", ".join(sorted(waiting_on))
                    raise KtlintError(f"Circular task dependency between: {cycle}")
                done, _ = wait(running, return_when=FIRST_COMPLETED)
                for future in done:
                    name = running.pop(future)
                    build.results[name] = future.result()
                    for blockers in waiting_on.values():
                        blockers.discard(name)
        return build

    def _execute(self, task: Task, dependencies: Sequence[TaskResult]) -> TaskResult:
        LOGGER.debug("executing %s", task.name)
        try:
            return task.execute(self._context, dependencies)
        except KtlintError as exc:
            LOGGER.debug("%s failed: %s", task.name, exc)
            return TaskResult(name=task.name, outcome=TaskOutcome.FAILED, message=str(exc))


__all__ = ["BuildResult", "BuildRunner"]
