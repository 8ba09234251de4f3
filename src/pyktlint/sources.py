# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source root modelling and file enumeration for ktlint tasks."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Final

_SEPARATOR: Final[str] = "/"
_DOUBLE_STAR: Final[str] = "**"


class SourceCategory(str, Enum):
    """File categories linted by separate task families."""

    SOURCE = "source"
    SCRIPT = "script"

    @property
    def extensions(self) -> tuple[str, ...]:
        """Return the file suffixes accepted by this category."""

        return (".kts",) if self is SourceCategory.SCRIPT else (".kt",)

    def accepts(self, path: Path) -> bool:
        """Return whether ``path`` carries one of the category's suffixes."""

        return path.suffix in self.extensions


@dataclass(frozen=True, slots=True)
class SourceRoot:
    """Named set of directories enumerated for one file category.

    ``recursive`` is false for the Kotlin script root, which only looks at the
    project directory itself.
    """

    name: str
    directories: tuple[Path, ...]
    category: SourceCategory = SourceCategory.SOURCE
    recursive: bool = True


@dataclass(frozen=True, slots=True)
class FileTree:
    """Additional directory tree with its own include/exclude patterns."""

    directory: Path
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()


def normalize_separators(value: str) -> str:
    """Return ``value`` with backslashes converted to forward slashes."""

    return value.replace("\\", _SEPARATOR)


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile an Ant-style pattern (``**``, ``*``, ``?``) into a regex.

    ``**/`` matches zero or more directories and a trailing ``/`` is treated as
    ``/**``. Either separator may be used in ``pattern``.
    """

    normalized = normalize_separators(pattern.strip())
    while normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = normalized.lstrip(_SEPARATOR)
    if normalized.endswith(_SEPARATOR):
        normalized += _DOUBLE_STAR
    segments = normalized.split(_SEPARATOR)
    parts: list[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == _DOUBLE_STAR:
            parts.append(".*" if last else "(?:[^/]*/)*")
            continue
        parts.append("".join(_translate_char(char) for char in segment))
        if not last:
            parts.append(_SEPARATOR)
    return re.compile("^" + "".join(parts) + "$")


def _translate_char(char: str) -> str:
    if char == "*":
        return "[^/]*"
    if char == "?":
        return "[^/]"
    return re.escape(char)


def matches_any(relative: str, patterns: Iterable[str]) -> bool:
    """Return whether the ``/``-separated ``relative`` path matches any pattern."""

    candidate = normalize_separators(relative)
    return any(compile_pattern(pattern).match(candidate) for pattern in patterns)


@dataclass(frozen=True, slots=True)
class PatternFilter:
    """Ordered exclude/include patterns applied to every candidate file."""

    excludes: tuple[str, ...] = ()
    includes: tuple[str, ...] = ()

    def allows(self, *relatives: str) -> bool:
        """Return whether a file survives the filter.

        Args:
            *relatives: Alternative relative spellings of the same file, for
                example relative to its source directory and to the project.
                A pattern matching any spelling counts as a match.

        Returns:
            bool: ``False`` when excluded, or when includes exist and none match.
        """

        if any(matches_any(relative, self.excludes) for relative in relatives):
            return False
        if not self.includes:
            return True
        return any(matches_any(relative, self.includes) for relative in relatives)

    def merged(self, other: PatternFilter) -> PatternFilter:
        """Return a filter applying both ``self`` and ``other`` patterns."""

        return PatternFilter(
            excludes=self.excludes + other.excludes,
            includes=self.includes + other.includes,
        )


class SourceSetResolver:
    """Enumerate the files a task should consider for a set of source roots."""

    def __init__(self, project_root: Path) -> None:
        self._project_root = project_root.resolve()

    @property
    def project_root(self) -> Path:
        """Return the resolved project directory."""

        return self._project_root

    def resolve(
        self,
        roots: Sequence[SourceRoot],
        extra_paths: Sequence[FileTree] = (),
        *,
        category: SourceCategory,
        pattern_filter: PatternFilter | None = None,
    ) -> tuple[Path, ...]:
        """Return ordered, de-duplicated files for ``roots`` and ``extra_paths``.

        Args:
            roots: Source roots enumerated in order.
            extra_paths: Additional trees enumerated after ``roots``.
            category: Category every root must belong to; also selects the
                suffix accepted from ``extra_paths``.
            pattern_filter: Project-wide include/exclude patterns.

        Returns:
            tuple[Path, ...]: Resolved file paths. Empty when nothing matches.

        Raises:
            ValueError: If a root belongs to a different category.
        """

        active_filter = pattern_filter or PatternFilter()
        results: list[Path] = []
        seen: set[Path] = set()

        def _collect(candidates: Iterable[tuple[Path, Path]], tree_filter: PatternFilter) -> None:
            for base, candidate in candidates:
                if not category.accepts(candidate):
                    continue
                resolved = candidate.resolve()
                if resolved in seen:
                    continue
                if not tree_filter.allows(*self._relative_spellings(base, resolved)):
                    continue
                seen.add(resolved)
                results.append(resolved)

        for root in roots:
            if root.category is not category:
                raise ValueError(f"source root '{root.name}' is not a {category.value} root")
            for directory in root.directories:
                base = self._absolute(directory)
                _collect(((base, path) for path in _iter_files(base, recursive=root.recursive)), active_filter)
        for tree in extra_paths:
            base = self._absolute(tree.directory)
            tree_filter = active_filter.merged(PatternFilter(excludes=tree.excludes, includes=tree.includes))
            _collect(((base, path) for path in _iter_files(base, recursive=True)), tree_filter)
        return tuple(results)

    def _absolute(self, directory: Path) -> Path:
        candidate = directory if directory.is_absolute() else self._project_root / directory
        return candidate.resolve()

    def _relative_spellings(self, base: Path, path: Path) -> tuple[str, ...]:
        spellings: list[str] = []
        for anchor in (base, self._project_root):
            try:
                spellings.append(path.relative_to(anchor).as_posix())
            except ValueError:
                continue
        return tuple(spellings) or (path.as_posix(),)


def _iter_files(base: Path, *, recursive: bool) -> Iterator[Path]:
    """Yield files below ``base`` in a stable order; nothing when it is missing."""

    if not base.is_dir():
        return
    if not recursive:
        yield from sorted(entry for entry in base.iterdir() if entry.is_file())
        return
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames.sort()
        current = Path(dirpath)
        for filename in sorted(filenames):
            yield current / filename


__all__ = [
    "FileTree",
    "PatternFilter",
    "SourceCategory",
    "SourceRoot",
    "SourceSetResolver",
    "compile_pattern",
    "matches_any",
    "normalize_separators",
]
