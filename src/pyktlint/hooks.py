# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install a git pre-commit hook running ktlint over staged Kotlin files."""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .tasks.naming import CHECK_PARENT_TASK_NAME, FORMAT_PARENT_TASK_NAME

LOGGER = logging.getLogger(__name__)

HOOK_NAME: Final[str] = "pre-commit"
HOOK_MARKER: Final[str] = "# pyktlint generated pre-commit hook"
BACKUP_SUFFIX: Final[str] = ".bak"

_CHECK_BODY: Final[str] = """#!/bin/sh
{marker}
set -e
pyktlint run {task} --staged --root "$(git rev-parse --show-toplevel)"
"""

_FORMAT_BODY: Final[str] = """#!/bin/sh
{marker}
set -e
root="$(git rev-parse --show-toplevel)"
pyktlint run {task} --staged --root "$root"
git diff --cached --name-only --diff-filter=d -- '*.kt' '*.kts' | while IFS= read -r file; do
    git add -- "$root/$file"
done
"""


@dataclass(slots=True)
class InstallResult:
    """Outcome of a hook installation."""

    hook: Path
    backup: Path | None = None


def render_hook(*, format_files: bool = False) -> str:
    """Return the hook script body.

    Args:
        format_files: Run the format aggregate and re-stage the rewritten files
            instead of only checking them.
    """

    if format_files:
        return _FORMAT_BODY.format(marker=HOOK_MARKER, task=FORMAT_PARENT_TASK_NAME)
    return _CHECK_BODY.format(marker=HOOK_MARKER, task=CHECK_PARENT_TASK_NAME)


def _free_backup_path(destination: Path) -> Path:
    candidate = destination.with_name(destination.name + BACKUP_SUFFIX)
    counter = 1
    while candidate.exists():
        candidate = destination.with_name(f"{destination.name}{BACKUP_SUFFIX}.{counter}")
        counter += 1
    return candidate


def install_pre_commit_hook(
    root: Path,
    *,
    format_files: bool = False,
    hooks_dir: Path | None = None,
) -> InstallResult:
    """Write the pre-commit hook into the repository at ``root``.

    A hook not written by pyktlint is moved aside to ``pre-commit.bak`` first,
    or to ``pre-commit.bak.<n>`` when earlier backups exist; a previously
    generated hook is simply replaced.

    Args:
        root: Repository root.
        format_files: Install the formatting variant of the hook.
        hooks_dir: Optional override for the hooks directory.

    Returns:
        InstallResult: Installed hook path and the backup path, if any.

    Raises:
        FileNotFoundError: If ``root`` is not a git repository.
    """

    project_root = root.resolve()
    git_dir = project_root / ".git"
    if not git_dir.is_dir():
        raise FileNotFoundError("Not a git repository (missing .git directory)")
    target_dir = hooks_dir or git_dir / "hooks"
    target_dir.mkdir(parents=True, exist_ok=True)

    destination = target_dir / HOOK_NAME
    backup: Path | None = None
    if destination.is_file() and HOOK_MARKER not in destination.read_text(encoding="utf-8", errors="replace"):
        backup = _free_backup_path(destination)
        LOGGER.debug("backing up existing hook %s to %s", destination, backup)
        destination.replace(backup)

    destination.write_text(render_hook(format_files=format_files), encoding="utf-8")
    destination.chmod(destination.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return InstallResult(hook=destination, backup=backup)


__all__ = ["HOOK_MARKER", "InstallResult", "install_pre_commit_hook", "render_hook"]
