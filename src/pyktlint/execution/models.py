# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Outcome types produced by task execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..engine.base import LintError


class TaskOutcome(str, Enum):
    """Terminal state of a task within one build invocation."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    UP_TO_DATE = "UP-TO-DATE"
    NO_SOURCE = "NO-SOURCE"

    @property
    def did_work(self) -> bool:
        return self in {TaskOutcome.SUCCESS, TaskOutcome.FAILED}


@dataclass(slots=True)
class TaskResult:
    """Outcome of a single task plus the evidence behind it."""

    name: str
    outcome: TaskOutcome
    diagnostics: list[LintError] = field(default_factory=list)
    files: tuple[Path, ...] = ()
    message: str | None = None

    @property
    def failed(self) -> bool:
        return self.outcome is TaskOutcome.FAILED


__all__ = ["TaskOutcome", "TaskResult"]
