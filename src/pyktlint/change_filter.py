# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Narrow task inputs to an externally supplied set of paths."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Final

from .process import CommandOptions, run_command
from .sources import normalize_separators

FILTER_INCLUDE_PROPERTY_NAME: Final[str] = "internalKtlintGitFilter"
_SPLIT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[,\n\r]+")

GitRunner = Callable[[Sequence[str], Path], list[str]]


def parse_restriction(raw: str | None) -> frozenset[str] | None:
    """Parse a comma or newline separated path list.

    Args:
        raw: Property value, or ``None`` when the property was not supplied.

    Returns:
        frozenset[str] | None: ``/``-separated entries, or ``None`` when no
        restriction applies. An empty value yields an empty restriction.
    """

    if raw is None:
        return None
    entries = (_normalize_entry(entry) for entry in _SPLIT_PATTERN.split(raw))
    return frozenset(entry for entry in entries if entry)


def _normalize_entry(entry: str) -> str:
    normalized = normalize_separators(entry.strip())
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class ChangeFilter:
    """Intersect candidate files with a restriction set."""

    def __init__(self, project_root: Path) -> None:
        self._project_root = project_root.resolve()

    def apply(self, candidates: Sequence[Path], restriction: Iterable[str] | None) -> tuple[Path, ...]:
        """Return the members of ``candidates`` named by ``restriction``.

        Args:
            candidates: Files already filtered by the source resolver.
            restriction: Paths relative to the project root or absolute, with
                either separator. ``None`` disables the filter.

        Returns:
            tuple[Path, ...]: Surviving candidates in their original order.
        """

        if restriction is None:
            return tuple(candidates)
        wanted = {_normalize_entry(entry) for entry in restriction}
        kept: list[Path] = []
        for candidate in candidates:
            if self._spellings(candidate) & wanted:
                kept.append(candidate)
        return tuple(kept)

    def _spellings(self, candidate: Path) -> set[str]:
        spellings = {candidate.as_posix()}
        try:
            spellings.add(candidate.relative_to(self._project_root).as_posix())
        except ValueError:
            pass
        return spellings


def _default_git_runner(cmd: Sequence[str], root: Path) -> list[str]:
    """Execute ``cmd`` returning stdout lines, or nothing when git fails."""

    try:
        completed = run_command(cmd, options=CommandOptions(cwd=root, check=False))
    except FileNotFoundError:
        return []
    if completed.returncode != 0:
        return []
    return (completed.stdout or "").splitlines()


def git_changed_paths(
    root: Path,
    *,
    staged: bool = False,
    include_untracked: bool = True,
    runner: GitRunner | None = None,
) -> frozenset[str]:
    """Return project-relative paths git reports as changed.

    Args:
        root: Project directory; it may sit below the repository top level.
        staged: Only report files staged in the index.
        include_untracked: Add untracked, non-ignored files (ignored when ``staged``).
        runner: Optional command runner used by tests.

    Returns:
        frozenset[str]: ``/``-separated paths relative to ``root``.
    """

    execute = runner or _default_git_runner
    if staged:
        commands: list[list[str]] = [["git", "diff", "--name-only", "--relative", "--cached"]]
    else:
        commands = [["git", "diff", "--name-only", "--relative", "HEAD", "--"]]
        if include_untracked:
            commands.append(["git", "ls-files", "--others", "--exclude-standard"])
    changed: set[str] = set()
    for cmd in commands:
        for line in execute(cmd, root):
            entry = _normalize_entry(line)
            if entry:
                changed.add(entry)
    return frozenset(changed)


__all__ = [
    "ChangeFilter",
    "FILTER_INCLUDE_PROPERTY_NAME",
    "GitRunner",
    "git_changed_paths",
    "parse_restriction",
]
