# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from pyktlint.config.models import KtlintConfig
from pyktlint.engine.base import EngineOptions, LintError
from pyktlint.project import Project

CLEAN_SOURCE = 'val foo = "bar"\n'
FAILING_SOURCE = 'val foo    =     "bar"\n'
FORMATTED_FAILING_SOURCE = 'val foo = "bar"\n'

_MULTI_SPACE = re.compile(r"(?<=\S)  +")
_CLASS_DECLARATION = re.compile(r"^class (\w+)", re.MULTILINE)
_TAB_INDENT = re.compile(r"^\t+", re.MULTILINE)


class FakeEngine:
    """In-process stand-in for the ktlint executable.

    Rules:
        * ``no-multi-spaces``: two or more spaces after a non-space character;
          fixed by ``format``.
        * ``filename``: a single top-level class in a file named differently;
          never auto-corrected.
        * ``experimental:indent``: tab indentation, only with experimental rules.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Path, ...]]] = []
        self.idea_calls: list[bool] = []
        self._lock = threading.Lock()

    def lint(self, files: Sequence[Path], options: EngineOptions) -> list[LintError]:
        self._record("lint", files)
        return [error for path in files for error in self._inspect(path, options)]

    def format(self, files: Sequence[Path], options: EngineOptions) -> list[LintError]:
        self._record("format", files)
        remaining: list[LintError] = []
        for path in files:
            text = path.read_text(encoding="utf-8")
            fixed = _MULTI_SPACE.sub(" ", text)
            if fixed != text:
                path.write_text(fixed, encoding="utf-8")
            remaining.extend(error for error in self._inspect(path, options) if not error.can_be_auto_corrected)
        return remaining

    def apply_to_idea(self, project_root: Path, options: EngineOptions, *, globally: bool) -> None:
        with self._lock:
            self.idea_calls.append(globally)

    def files_for(self, action: str) -> list[tuple[Path, ...]]:
        return [files for name, files in self.calls if name == action]

    def _record(self, action: str, files: Sequence[Path]) -> None:
        with self._lock:
            self.calls.append((action, tuple(files)))

    def _inspect(self, path: Path, options: EngineOptions) -> list[LintError]:
        text = path.read_text(encoding="utf-8")
        errors: list[LintError] = []
        for number, line in enumerate(text.splitlines(), start=1):
            match = _MULTI_SPACE.search(line)
            if match is not None:
                errors.append(LintError(path, number, match.start() + 1, "no-multi-spaces", "Unnecessary space(s)"))
        classes = _CLASS_DECLARATION.findall(text)
        if path.suffix == ".kt" and len(classes) == 1 and classes[0] != path.stem:
            errors.append(
                LintError(
                    path,
                    1,
                    1,
                    "filename",
                    f"class {classes[0]} should be declared in a file named {classes[0]}.kt",
                    can_be_auto_corrected=False,
                ),
            )
        if options.experimental_rules:
            for match in _TAB_INDENT.finditer(text):
                line = text.count("\n", 0, match.start()) + 1
                errors.append(LintError(path, line, 1, "experimental:indent", "Unexpected tab character(s)"))
        return [error for error in errors if error.rule_id not in options.disabled_rules]


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


def write_source(root: Path, relative: str, content: str = CLEAN_SOURCE) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Project]:
    """Return a factory building a :class:`Project` rooted at ``tmp_path``."""

    def _factory(root: Path | None = None, **overrides: Any) -> Project:
        overrides.setdefault("jobs", 2)
        return Project(root or tmp_path, KtlintConfig(**overrides), cache_dir=tmp_path / ".ktlint-cache")

    return _factory
