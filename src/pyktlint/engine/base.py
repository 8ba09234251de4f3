# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Boundary types shared by every ktlint engine implementation."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..versioning import ResolvedKtlint

NOT_AUTO_CORRECTABLE_SUFFIX: Final[str] = " (cannot be auto-corrected)"


@dataclass(frozen=True, slots=True)
class LintError:
    """Single rule violation reported by ktlint."""

    file: Path
    line: int
    column: int
    rule_id: str
    message: str
    can_be_auto_corrected: bool = True

    @property
    def detail(self) -> str:
        """Return the message annotated when the violation cannot be fixed automatically."""

        if self.can_be_auto_corrected:
            return self.message
        return f"{self.message}{NOT_AUTO_CORRECTABLE_SUFFIX}"


@dataclass(frozen=True, slots=True)
class EngineOptions:
    """Flags forwarded to every engine invocation."""

    ktlint: ResolvedKtlint
    android: bool = False
    verbose: bool = False
    debug: bool = False

    @property
    def experimental_rules(self) -> bool:
        return self.ktlint.experimental_rules

    @property
    def disabled_rules(self) -> tuple[str, ...]:
        return self.ktlint.disabled_rules


@runtime_checkable
class LintEngine(Protocol):
    """Protocol implemented by ktlint backends.

    ``lint`` and ``format`` receive exactly the files a task selected; ``format``
    rewrites them in place and returns the violations it could not fix.
    Fatal failures raise :class:`pyktlint.errors.LinterExecutionError`.
    """

    @abstractmethod
    def lint(self, files: Sequence[Path], options: EngineOptions) -> list[LintError]:
        """Return violations found in ``files``."""
        raise NotImplementedError

    @abstractmethod
    def format(self, files: Sequence[Path], options: EngineOptions) -> list[LintError]:
        """Rewrite ``files`` in place and return the remaining violations."""
        raise NotImplementedError

    @abstractmethod
    def apply_to_idea(self, project_root: Path, options: EngineOptions, *, globally: bool) -> None:
        """Export the ktlint code style into IntelliJ IDEA settings."""
        raise NotImplementedError


__all__ = ["EngineOptions", "LintEngine", "LintError", "NOT_AUTO_CORRECTABLE_SUFFIX"]
