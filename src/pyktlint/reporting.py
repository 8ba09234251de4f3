# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render lint diagnostics as console lines and report files."""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Final

from .config.models import ReporterType
from .engine.base import LintError

LOGGER = logging.getLogger(__name__)

CHECKSTYLE_VERSION: Final[str] = "8.0"

Renderer = Callable[[Sequence[LintError], Path], str]


def display_relative_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators when possible."""

    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _rule_suffix(error: LintError) -> str:
    return f" ({error.rule_id})" if error.rule_id else ""


def _group_by_file(errors: Iterable[LintError], root: Path) -> dict[str, list[LintError]]:
    grouped: dict[str, list[LintError]] = defaultdict(list)
    for error in errors:
        grouped[display_relative_path(error.file, root)].append(error)
    return dict(sorted(grouped.items()))


def format_plain_line(error: LintError, root: Path) -> str:
    """Return ``path:line:col: detail (rule)`` for ``error``."""

    location = f"{display_relative_path(error.file, root)}:{error.line}:{error.column}"
    return f"{location}: {error.detail}{_rule_suffix(error)}"


def render_plain(errors: Sequence[LintError], root: Path) -> str:
    return "".join(f"{format_plain_line(error, root)}\n" for error in errors)


def render_plain_group_by_file(errors: Sequence[LintError], root: Path) -> str:
    lines: list[str] = []
    for path, entries in _group_by_file(errors, root).items():
        lines.append(path)
        lines.extend(f"  {error.line}:{error.column} {error.detail}{_rule_suffix(error)}" for error in entries)
    return "".join(f"{line}\n" for line in lines)


def render_json(errors: Sequence[LintError], root: Path) -> str:
    payload = [
        {
            "file": path,
            "errors": [
                {
                    "line": error.line,
                    "column": error.column,
                    "message": error.message,
                    "rule": error.rule_id,
                    "canBeAutoCorrected": error.can_be_auto_corrected,
                }
                for error in entries
            ],
        }
        for path, entries in _group_by_file(errors, root).items()
    ]
    return json.dumps(payload, indent=2) + "\n"


def render_checkstyle(errors: Sequence[LintError], root: Path) -> str:
    document = ET.Element("checkstyle", version=CHECKSTYLE_VERSION)
    for path, entries in _group_by_file(errors, root).items():
        file_element = ET.SubElement(document, "file", name=path)
        for error in entries:
            ET.SubElement(
                file_element,
                "error",
                line=str(error.line),
                column=str(error.column),
                severity="error",
                message=error.detail,
                source=error.rule_id,
            )
    ET.indent(document)
    return '<?xml version="1.0" encoding="utf-8"?>\n' + ET.tostring(document, encoding="unicode") + "\n"


_RENDERERS: Final[dict[ReporterType, Renderer]] = {
    ReporterType.PLAIN: render_plain,
    ReporterType.PLAIN_GROUP_BY_FILE: render_plain_group_by_file,
    ReporterType.CHECKSTYLE: render_checkstyle,
    ReporterType.JSON: render_json,
}


def report_path(reports_dir: Path, task_name: str, reporter: ReporterType) -> Path:
    """Return where ``task_name`` writes its ``reporter`` report."""

    suffix = f"-{reporter.value}" if reporter is ReporterType.PLAIN_GROUP_BY_FILE else ""
    return reports_dir / f"{task_name}{suffix}.{reporter.extension}"


def write_reports(
    reports_dir: Path,
    task_name: str,
    errors: Sequence[LintError],
    *,
    root: Path,
    reporters: Iterable[ReporterType],
) -> list[Path]:
    """Write one report per reporter and return the written paths.

    I/O failures are logged and skipped; reports never change a task outcome.
    """

    written: list[Path] = []
    for reporter in reporters:
        target = report_path(reports_dir, task_name, reporter)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(_RENDERERS[reporter](errors, root), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("unable to write %s report for %s: %s", reporter.value, task_name, exc)
            continue
        written.append(target)
    return written


__all__ = [
    "format_plain_line",
    "render_checkstyle",
    "render_json",
    "render_plain",
    "render_plain_group_by_file",
    "report_path",
    "write_reports",
]
