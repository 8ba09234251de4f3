# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Task naming and graph construction."""

from __future__ import annotations

from .naming import (
    CHECK_PARENT_TASK_NAME,
    FORMAT_PARENT_TASK_NAME,
    AggregateKey,
    LeafKey,
    MetaKey,
    MetaTask,
    TaskKind,
    task_name,
)
from .graph import AggregateTask, ApplyToIdeaTask, LintTask, Task, TaskGraph, TaskGraphBuilder

__all__ = [
    "AggregateKey",
    "AggregateTask",
    "ApplyToIdeaTask",
    "CHECK_PARENT_TASK_NAME",
    "FORMAT_PARENT_TASK_NAME",
    "LeafKey",
    "LintTask",
    "MetaKey",
    "MetaTask",
    "Task",
    "TaskGraph",
    "TaskGraphBuilder",
    "TaskKind",
    "task_name",
]
