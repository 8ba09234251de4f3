# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for task naming and graph construction."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from pathlib import Path

import pytest

from pyktlint.project import Project
from pyktlint.sources import SourceCategory, SourceRoot
from pyktlint.tasks.graph import AggregateTask, ApplyToIdeaTask, LintTask, TaskGraphBuilder
from pyktlint.tasks.naming import (
    KOTLIN_SCRIPT_CHECK_TASK,
    KOTLIN_SCRIPT_FORMAT_TASK,
    AggregateKey,
    LeafKey,
    MetaKey,
    MetaTask,
    TaskKind,
    task_name,
)

DEFAULT_TASKS = {
    "ktlintMainSourceSetCheck",
    "ktlintMainSourceSetFormat",
    "ktlintTestSourceSetCheck",
    "ktlintTestSourceSetFormat",
    "ktlintKotlinScriptCheck",
    "ktlintKotlinScriptFormat",
    "ktlintCheck",
    "ktlintFormat",
    "ktlintApplyToIdea",
    "ktlintApplyToIdeaGlobally",
}


def _roots(*names: str) -> list[SourceRoot]:
    return [SourceRoot(name=name, directories=(Path("src") / name / "kotlin",)) for name in names]


def test_task_names_are_unique_across_every_key() -> None:
    roots = ["main", "test", "androidTest", "debug", "kotlinScript"]
    keys = [
        LeafKey(root, kind, category)
        for root, kind, category in itertools.product(roots, TaskKind, SourceCategory)
    ]
    keys.extend(AggregateKey(kind) for kind in TaskKind)
    keys.extend(MetaKey(task) for task in MetaTask)

    names = [task_name(key) for key in keys]

    assert len(set(names)) == len(names)
    assert all(name.startswith("ktlint") for name in names)


def test_task_names_follow_the_conventions() -> None:
    assert task_name(LeafKey("main", TaskKind.CHECK, SourceCategory.SOURCE)) == "ktlintMainSourceSetCheck"
    assert task_name(LeafKey("androidTest", TaskKind.FORMAT, SourceCategory.SOURCE)) == (
        "ktlintAndroidTestSourceSetFormat"
    )
    assert KOTLIN_SCRIPT_CHECK_TASK == "ktlintKotlinScriptCheck"
    assert KOTLIN_SCRIPT_FORMAT_TASK == "ktlintKotlinScriptFormat"
    assert task_name(AggregateKey(TaskKind.FORMAT)) == "ktlintFormat"
    assert task_name(MetaKey(MetaTask.APPLY_TO_IDEA_GLOBALLY)) == "ktlintApplyToIdeaGlobally"


def test_default_graph_contents() -> None:
    graph = TaskGraphBuilder().build(_roots("main", "test"))

    assert {task.name for task in graph} == DEFAULT_TASKS
    assert len(graph) == 10
    assert [task.name for task in graph.listing()] == [
        "ktlintApplyToIdea",
        "ktlintApplyToIdeaGlobally",
        "ktlintCheck",
        "ktlintFormat",
    ]
    assert len(graph.listing(show_all=True)) == 10


def test_aggregates_depend_on_every_leaf_of_their_kind() -> None:
    graph = TaskGraphBuilder().build(_roots("main", "test"))

    check = graph.get("ktlintCheck")
    assert isinstance(check, AggregateTask)
    assert set(check.depends_on) == {task.name for task in graph.leaves(TaskKind.CHECK)}
    assert set(check.depends_on) == {
        "ktlintMainSourceSetCheck",
        "ktlintTestSourceSetCheck",
        "ktlintKotlinScriptCheck",
    }
    assert isinstance(graph.get("ktlintApplyToIdea"), ApplyToIdeaTask)


def test_check_leaves_run_after_matching_format_leaf() -> None:
    graph = TaskGraphBuilder().build(_roots("main"))

    main_check = graph.get("ktlintMainSourceSetCheck")
    script_check = graph.get("ktlintKotlinScriptCheck")
    main_format = graph.get("ktlintMainSourceSetFormat")

    assert isinstance(main_check, LintTask)
    assert main_check.must_run_after == ["ktlintMainSourceSetFormat"]
    assert script_check is not None and script_check.must_run_after == ["ktlintKotlinScriptFormat"]
    assert main_format is not None and main_format.must_run_after == []
    assert main_check.depends_on == []


def test_duplicate_registration_is_rejected() -> None:
    graph = TaskGraphBuilder().build(_roots("main"))
    existing = graph.get("ktlintCheck")
    assert existing is not None

    with pytest.raises(ValueError, match="already registered"):
        graph.add(existing)


def test_added_source_set_gets_leaves(make_project: Callable[..., Project]) -> None:
    project = make_project()

    project.add_source_set("integrationTest", [Path("src/integrationTest/kotlin")])

    names = {task.name for task in project.graph}
    assert "ktlintIntegrationTestSourceSetCheck" in names
    assert "ktlintIntegrationTestSourceSetFormat" in names
    check = project.graph.get("ktlintCheck")
    assert check is not None and "ktlintIntegrationTestSourceSetCheck" in check.depends_on
    assert len(project.graph) == 12
    with pytest.raises(ValueError, match="already exists"):
        project.add_source_set("main", [Path("src/other")])
