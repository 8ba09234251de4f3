# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Incremental execution of leaf lint and format tasks."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ..engine.base import LintError
from ..errors import KtlintError
from ..reporting import write_reports
from ..tasks.naming import TaskKind
from .models import TaskOutcome, TaskResult
from .records import ExecutionRecord, RecordStore, fingerprint_files, fingerprint_key

if TYPE_CHECKING:
    from ..tasks.graph import LintTask
    from .context import BuildContext

LOGGER = logging.getLogger(__name__)

WORK_DIR_NAME: Final[str] = "ktlint"
REPORTS_DIR_NAME: Final[str] = "reports"
MANIFEST_SUFFIX: Final[str] = ".args"


class IncrementalExecutor:
    """Decide whether a leaf task runs, and over which files.

    A task is skipped when its input fingerprints and configuration match the
    record of its last successful run that left its inputs untouched. When only
    some inputs changed since such a run, just those files are passed to the
    engine. Any other situation processes the full input set.
    """

    def __init__(self, build_dir: Path) -> None:
        self._work_dir = build_dir / WORK_DIR_NAME
        self._reports_dir = build_dir / REPORTS_DIR_NAME / WORK_DIR_NAME
        self._records = RecordStore(self._work_dir)

    @property
    def records(self) -> RecordStore:
        return self._records

    @property
    def reports_dir(self) -> Path:
        return self._reports_dir

    def manifest_path(self, task_name: str) -> Path:
        """Return the file listing the paths handed to the engine by ``task_name``."""

        return self._work_dir / f"{task_name}{MANIFEST_SUFFIX}"

    def execute(self, task: LintTask, context: BuildContext) -> TaskResult:
        """Run ``task`` within ``context`` honouring previous execution records.

        Args:
            task: Leaf task to execute.
            context: Build state providing the engine and file resolution.

        Returns:
            TaskResult: Outcome with the diagnostics and files processed.

        Raises:
            KtlintError: When version resolution failed or the engine aborted.
        """

        name = task.name
        root = context.project_root
        files = task.input_files(context)
        if not files:
            self._records.invalidate(name)
            return TaskResult(name=name, outcome=TaskOutcome.NO_SOURCE)

        options = context.engine_options()
        snapshot = dict(context.config_snapshot())
        fingerprints = fingerprint_files(files, root)
        previous = self._records.load(name)
        if previous is not None and previous.reusable and previous.matches(fingerprints, snapshot):
            LOGGER.debug("%s is up to date", name)
            return TaskResult(name=name, outcome=TaskOutcome.UP_TO_DATE, files=files)

        selected = files
        if previous is not None and previous.reusable and previous.config == snapshot:
            changed = previous.changed_keys(fingerprints)
            selected = tuple(path for path in files if fingerprint_key(path, root) in changed)
        self._write_manifest(name, selected, root)

        diagnostics: list[LintError] = []
        if selected:
            LOGGER.debug("%s processing %d file(s)", name, len(selected))
            invoke = context.engine.format if task.kind is TaskKind.FORMAT else context.engine.lint
            try:
                diagnostics = invoke(selected, options)
            except KtlintError:
                self._records.invalidate(name)
                raise

        outcome = TaskOutcome.SUCCESS
        if task.kind is TaskKind.CHECK and diagnostics and not context.config.ignore_failures:
            outcome = TaskOutcome.FAILED
        after = fingerprint_files(files, root)
        self._records.store(
            ExecutionRecord(
                task=name,
                fingerprints=after,
                config=snapshot,
                outcome=outcome,
                inputs_modified=after != fingerprints,
            ),
        )
        write_reports(
            self._reports_dir,
            name,
            diagnostics,
            root=root,
            reporters=context.config.reporters,
        )
        message = None
        if outcome is TaskOutcome.FAILED:
            message = f"KtLint found code style violations. Please see the following reports: {self._reports_dir}"
        return TaskResult(name=name, outcome=outcome, diagnostics=diagnostics, files=selected, message=message)

    def _write_manifest(self, task_name: str, files: Sequence[Path], root: Path) -> None:
        target = self.manifest_path(task_name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("".join(f"{fingerprint_key(path, root)}\n" for path in files), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("unable to write argument manifest %s: %s", target, exc)


__all__ = ["IncrementalExecutor", "MANIFEST_SUFFIX"]
