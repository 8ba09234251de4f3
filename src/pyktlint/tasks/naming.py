# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Task identity keys and the deterministic names derived from them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, TypeAlias

from ..sources import SourceCategory

TASK_PREFIX: Final[str] = "ktlint"
KOTLIN_SCRIPT_ROOT: Final[str] = "kotlinScript"


class TaskKind(str, Enum):
    """Kinds of work performed by ktlint tasks."""

    CHECK = "check"
    FORMAT = "format"


class MetaTask(str, Enum):
    """Editor integration tasks that have no source inputs."""

    APPLY_TO_IDEA = "apply_to_idea"
    APPLY_TO_IDEA_GLOBALLY = "apply_to_idea_globally"


@dataclass(frozen=True, slots=True)
class LeafKey:
    """Identity of a leaf task: one source root, kind and category."""

    root: str
    kind: TaskKind
    category: SourceCategory


@dataclass(frozen=True, slots=True)
class AggregateKey:
    """Identity of the grand aggregate task for a kind."""

    kind: TaskKind


@dataclass(frozen=True, slots=True)
class MetaKey:
    """Identity of an editor integration task."""

    task: MetaTask


TaskKey: TypeAlias = LeafKey | AggregateKey | MetaKey


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def task_name(key: TaskKey) -> str:
    """Return the task name for ``key``.

    Examples: ``ktlintMainSourceSetCheck``, ``ktlintKotlinScriptFormat``,
    ``ktlintCheck``, ``ktlintApplyToIdeaGlobally``.
    """

    match key:
        case LeafKey(root=root, kind=kind, category=SourceCategory.SCRIPT):
            return f"{TASK_PREFIX}{_capitalize(root)}{_capitalize(kind.value)}"
        case LeafKey(root=root, kind=kind, category=SourceCategory.SOURCE):
            return f"{TASK_PREFIX}{_capitalize(root)}SourceSet{_capitalize(kind.value)}"
        case AggregateKey(kind=kind):
            return f"{TASK_PREFIX}{_capitalize(kind.value)}"
        case MetaKey(task=MetaTask.APPLY_TO_IDEA):
            return f"{TASK_PREFIX}ApplyToIdea"
        case MetaKey(task=MetaTask.APPLY_TO_IDEA_GLOBALLY):
            return f"{TASK_PREFIX}ApplyToIdeaGlobally"
    raise TypeError(f"unsupported task key: {key!r}")


CHECK_PARENT_TASK_NAME: Final[str] = task_name(AggregateKey(TaskKind.CHECK))
FORMAT_PARENT_TASK_NAME: Final[str] = task_name(AggregateKey(TaskKind.FORMAT))
APPLY_TO_IDEA_TASK_NAME: Final[str] = task_name(MetaKey(MetaTask.APPLY_TO_IDEA))
APPLY_TO_IDEA_GLOBALLY_TASK_NAME: Final[str] = task_name(MetaKey(MetaTask.APPLY_TO_IDEA_GLOBALLY))
KOTLIN_SCRIPT_CHECK_TASK: Final[str] = task_name(LeafKey(KOTLIN_SCRIPT_ROOT, TaskKind.CHECK, SourceCategory.SCRIPT))
KOTLIN_SCRIPT_FORMAT_TASK: Final[str] = task_name(LeafKey(KOTLIN_SCRIPT_ROOT, TaskKind.FORMAT, SourceCategory.SCRIPT))


__all__ = [
    "APPLY_TO_IDEA_GLOBALLY_TASK_NAME",
    "APPLY_TO_IDEA_TASK_NAME",
    "AggregateKey",
    "CHECK_PARENT_TASK_NAME",
    "FORMAT_PARENT_TASK_NAME",
    "KOTLIN_SCRIPT_CHECK_TASK",
    "KOTLIN_SCRIPT_FORMAT_TASK",
    "KOTLIN_SCRIPT_ROOT",
    "LeafKey",
    "MetaKey",
    "MetaTask",
    "TaskKey",
    "TaskKind",
    "task_name",
]
