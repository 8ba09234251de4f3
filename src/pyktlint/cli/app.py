# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the pyktlint commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from ..change_filter import FILTER_INCLUDE_PROPERTY_NAME, git_changed_paths, parse_restriction
from ..config.models import ConfigError
from ..errors import TaskNotFoundError
from ..execution.models import TaskOutcome
from ..execution.runner import BuildResult
from ..hooks import install_pre_commit_hook
from ..project import KTLINT_CONFIGURATION_DESCRIPTION, KTLINT_CONFIGURATION_NAME, Project
from ..reporting import format_plain_line
from .options import DEBUG_OPTION, EMOJI_OPTION, PROPERTY_OPTION, ROOT_OPTION, parse_properties
from .shared import CLIError, CLILogger, build_cli_logger

CONFIG_ERROR_EXIT_CODE = 2

app = typer.Typer(
    name="pyktlint",
    help="Run ktlint check and format tasks over Kotlin sources.",
    no_args_is_help=True,
    add_completion=False,
)


def _load_project(root: Path) -> Project:
    try:
        return Project.load(root)
    except ConfigError as exc:
        raise CLIError(str(exc), exit_code=CONFIG_ERROR_EXIT_CODE) from exc


def _restriction(
    properties: dict[str, str],
    *,
    root: Path,
    changed: bool,
    staged: bool,
    logger: CLILogger,
) -> frozenset[str] | None:
    restriction = parse_restriction(properties.get(FILTER_INCLUDE_PROPERTY_NAME))
    if restriction is None and (changed or staged):
        restriction = git_changed_paths(root, staged=staged)
        logger.debug(f"git restriction files={len(restriction)} staged={staged}")
    return restriction


def _emit_build(result: BuildResult, *, project: Project, logger: CLILogger) -> None:
    for name, task_result in result.results.items():
        logger.task_outcome(name, task_result.outcome.value)
        if project.config.output_to_console:
            for error in task_result.diagnostics:
                line = format_plain_line(error, project.root)
                if task_result.outcome is TaskOutcome.FAILED:
                    logger.fail(line)
                else:
                    logger.warn(line)
        if task_result.message:
            emit = logger.fail if task_result.failed else logger.info
            emit(task_result.message)


@app.command("tasks")
def list_tasks(
    root: ROOT_OPTION = Path("."),
    show_all: Annotated[bool, typer.Option("--all", help="Include leaf tasks.")] = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """List the ktlint tasks of the project."""

    logger = build_cli_logger(emoji=emoji)
    try:
        project = _load_project(root)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    for task in project.graph.listing(show_all=show_all):
        logger.echo(f"{task.name} - {task.description}")


@app.command("dependencies")
def list_dependencies(
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
) -> None:
    """Show the ktlint artifact resolved for the project."""

    logger = build_cli_logger(emoji=emoji)
    try:
        project = _load_project(root)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    logger.echo(f"{KTLINT_CONFIGURATION_NAME} - {KTLINT_CONFIGURATION_DESCRIPTION}")
    coordinates = project.dependencies()
    if not coordinates:
        logger.echo("No dependencies")
    for entry in coordinates:
        logger.echo(f"\\--- {entry}")
    if project.ktlint_error is not None:
        logger.warn(str(project.ktlint_error))


@app.command("run")
def run_tasks(
    tasks: Annotated[list[str], typer.Argument(help="Task names to execute.")],
    root: ROOT_OPTION = Path("."),
    properties: PROPERTY_OPTION = None,
    changed: Annotated[bool, typer.Option("--changed", help="Only process files changed in git.")] = False,
    staged: Annotated[bool, typer.Option("--staged", help="Only process files staged in git.")] = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Run tasks and everything they depend on."""

    logger = build_cli_logger(emoji=emoji, debug=debug)
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    try:
        parsed = parse_properties(properties)
        project = _load_project(root)
        restriction = _restriction(parsed, root=project.root, changed=changed, staged=staged, logger=logger)
        logger.debug(f"root={project.root} tasks={','.join(tasks)} jobs={project.config.jobs}")
        result = project.run(tasks, restriction=restriction)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except TaskNotFoundError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    _emit_build(result, project=project, logger=logger)
    if result.failed:
        logger.fail("BUILD FAILED")
        raise typer.Exit(code=1)
    logger.ok("BUILD SUCCESSFUL")


@app.command("install-hook")
def install_hook(
    root: ROOT_OPTION = Path("."),
    format_files: Annotated[bool, typer.Option("--format", help="Format staged files instead of checking.")] = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Install a git pre-commit hook running ktlint on staged files."""

    logger = build_cli_logger(emoji=emoji)
    try:
        result = install_pre_commit_hook(root, format_files=format_files)
    except FileNotFoundError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    if result.backup is not None:
        logger.info(f"Backed up existing pre-commit hook to {result.backup}")
    logger.ok(f"Installed pre-commit hook at {result.hook}")


__all__ = ["app"]
