# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Task execution: outcomes, records, incremental executor and scheduler."""

from __future__ import annotations

from .models import TaskOutcome, TaskResult
from .records import ExecutionRecord, RecordStore
from .context import BuildContext
from .executor import IncrementalExecutor
from .runner import BuildResult, BuildRunner

__all__ = [
    "BuildContext",
    "BuildResult",
    "BuildRunner",
    "ExecutionRecord",
    "IncrementalExecutor",
    "RecordStore",
    "TaskOutcome",
    "TaskResult",
]
