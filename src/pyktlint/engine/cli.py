# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Engine backed by the standalone ktlint command line executable."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ..errors import LinterExecutionError, LinterLaunchError
from ..process import CommandOptions, SubprocessExecutionError, run_command
from ..versioning import ResolvedKtlint
from .base import NOT_AUTO_CORRECTABLE_SUFFIX, EngineOptions, LintError

LOGGER = logging.getLogger(__name__)

ExecutableResolver = Callable[[ResolvedKtlint], Path]

_EXIT_OK: Final[int] = 0
_EXIT_VIOLATIONS: Final[int] = 1
_PLAIN_LINE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+): (?P<message>.*?)"
    r"(?P<manual>" + re.escape(NOT_AUTO_CORRECTABLE_SUFFIX) + r")?"
    r"(?: \((?P<rule>[\w:.-]+)\))?$",
)


def parse_plain_report(output: str, *, cwd: Path) -> list[LintError]:
    """Parse ``--reporter=plain --verbose`` output into :class:`LintError` values.

    Args:
        output: Standard output captured from ktlint.
        cwd: Working directory used to resolve relative file names.

    Returns:
        list[LintError]: Violations in report order; unrelated lines are skipped.
    """

    errors: list[LintError] = []
    for raw_line in output.splitlines():
        line = raw_line.rstrip()
        match = _PLAIN_LINE.match(line)
        if match is None:
            continue
        path = Path(match.group("file"))
        errors.append(
            LintError(
                file=path if path.is_absolute() else cwd / path,
                line=int(match.group("line")),
                column=int(match.group("column")),
                rule_id=match.group("rule") or "",
                message=match.group("message"),
                can_be_auto_corrected=match.group("manual") is None,
            ),
        )
    return errors


def _launch(command: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
    """Run ``command``, reporting an executable that cannot be started as a ktlint error."""

    try:
        return run_command(command, options=options)
    except OSError as exc:
        raise LinterLaunchError(command[0], exc) from exc


class KtlintCliEngine:
    """Run ktlint as a subprocess and translate its plain report."""

    def __init__(
        self,
        resolver: ExecutableResolver,
        *,
        cwd: Path,
        timeout: float | None = None,
    ) -> None:
        """Create an engine.

        Args:
            resolver: Callable returning the ktlint executable for a resolved version.
            cwd: Working directory for every invocation, normally the project root.
            timeout: Optional per-invocation timeout in seconds.
        """

        self._resolver = resolver
        self._cwd = cwd
        self._timeout = timeout

    def lint(self, files: Sequence[Path], options: EngineOptions) -> list[LintError]:
        return self._run(files, options, format_files=False)

    def format(self, files: Sequence[Path], options: EngineOptions) -> list[LintError]:
        return self._run(files, options, format_files=True)

    def apply_to_idea(self, project_root: Path, options: EngineOptions, *, globally: bool) -> None:
        command = [str(self._resolver(options.ktlint))]
        command.append("--apply-to-idea" if globally else "--apply-to-idea-project")
        if options.android:
            command.append("--android")
        command.append("-y")
        LOGGER.debug("running %s", command)
        try:
            _launch(command, CommandOptions(cwd=project_root, timeout=self._timeout))
        except SubprocessExecutionError as exc:
            raise LinterExecutionError(exc.command, exc.returncode, exc.stderr) from exc

    def build_command(self, files: Sequence[Path], options: EngineOptions, *, format_files: bool) -> list[str]:
        """Return the ktlint command line for ``files``."""

        command = [str(self._resolver(options.ktlint))]
        if options.android:
            command.append("--android")
        if options.experimental_rules:
            command.append("--experimental")
        if options.disabled_rules:
            command.append(f"--disabled_rules={','.join(options.disabled_rules)}")
        if options.debug:
            command.append("--debug")
        command.extend(["--verbose", "--reporter=plain"])
        if format_files:
            command.append("-F")
        command.extend(str(path) for path in files)
        return command

    def _run(self, files: Sequence[Path], options: EngineOptions, *, format_files: bool) -> list[LintError]:
        if not files:
            return []
        command = self.build_command(files, options, format_files=format_files)
        LOGGER.debug("running %s", command)
        completed = _launch(command, CommandOptions(cwd=self._cwd, check=False, timeout=self._timeout))
        errors = parse_plain_report(completed.stdout or "", cwd=self._cwd)
        if completed.returncode == _EXIT_OK:
            return errors
        if completed.returncode == _EXIT_VIOLATIONS and errors:
            return errors
        raise LinterExecutionError(command, completed.returncode, completed.stderr)


__all__ = ["ExecutableResolver", "KtlintCliEngine", "parse_plain_report"]
