# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ktlint command line engine and executable resolution."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from pyktlint.engine.artifacts import (
    ArtifactResolutionError,
    cached_executable_path,
    release_url,
    resolve_executable,
)
from pyktlint.engine.base import EngineOptions, LintEngine
from pyktlint.engine.cli import KtlintCliEngine, parse_plain_report
from pyktlint.errors import LinterExecutionError, LinterLaunchError
from pyktlint.versioning import ResolvedKtlint, VersionPolicy

PLAIN_OUTPUT = """\
src/main/kotlin/Foo.kt:1:8: Unnecessary space(s) (no-multi-spaces)
src/main/kotlin/Foo.kt:3:1: class Test should be declared in a file named Test.kt (cannot be auto-corrected) (filename)
/abs/Bar.kt:2:4: Unexpected indentation (experimental:indent)
Summary: 3 errors
"""


def _script(path: Path, body: str) -> Path:
    path.write_text(f"#!/bin/sh\n{body}", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def _resolved(version: str = "0.34.0", **kwargs: object) -> ResolvedKtlint:
    return VersionPolicy().resolve(version, **kwargs)  # type: ignore[arg-type]


def test_parse_plain_report(tmp_path: Path) -> None:
    errors = parse_plain_report(PLAIN_OUTPUT, cwd=tmp_path)

    assert len(errors) == 3
    first, second, third = errors
    assert first.file == tmp_path / "src/main/kotlin/Foo.kt"
    assert (first.line, first.column, first.rule_id, first.message) == (1, 8, "no-multi-spaces", "Unnecessary space(s)")
    assert first.can_be_auto_corrected
    assert second.message == "class Test should be declared in a file named Test.kt"
    assert not second.can_be_auto_corrected
    assert second.detail.endswith("(cannot be auto-corrected)")
    assert third.file == Path("/abs/Bar.kt")
    assert third.rule_id == "experimental:indent"


def test_build_command_reflects_options(tmp_path: Path) -> None:
    engine = KtlintCliEngine(lambda resolved: tmp_path / "ktlint", cwd=tmp_path)
    options = EngineOptions(
        ktlint=_resolved(experimental_rules=True, disabled_rules=["filename", "indent"]),
        android=True,
        debug=True,
    )

    command = engine.build_command([tmp_path / "A.kt"], options, format_files=True)

    assert command == [
        str(tmp_path / "ktlint"),
        "--android",
        "--experimental",
        "--disabled_rules=filename,indent",
        "--debug",
        "--verbose",
        "--reporter=plain",
        "-F",
        str(tmp_path / "A.kt"),
    ]
    assert isinstance(engine, LintEngine)


def test_engine_parses_violations_from_executable(tmp_path: Path) -> None:
    script = _script(tmp_path / "ktlint", f"cat <<'EOF'\n{PLAIN_OUTPUT}EOF\nexit 1\n")
    engine = KtlintCliEngine(lambda resolved: script, cwd=tmp_path)

    errors = engine.lint([tmp_path / "Foo.kt"], EngineOptions(ktlint=_resolved()))

    assert [error.rule_id for error in errors] == ["no-multi-spaces", "filename", "experimental:indent"]
    assert engine.lint([], EngineOptions(ktlint=_resolved())) == []


def test_engine_raises_on_fatal_exit(tmp_path: Path) -> None:
    script = _script(tmp_path / "ktlint", "echo 'boom' >&2\nexit 2\n")
    engine = KtlintCliEngine(lambda resolved: script, cwd=tmp_path)

    with pytest.raises(LinterExecutionError) as excinfo:
        engine.format([tmp_path / "Foo.kt"], EngineOptions(ktlint=_resolved()))

    assert excinfo.value.returncode == 2
    assert "boom" in str(excinfo.value)


def test_engine_reports_executable_that_cannot_start(tmp_path: Path) -> None:
    binary = tmp_path / "ktlint"
    binary.write_text("not a program\n", encoding="utf-8")
    binary.chmod(0o644)
    engine = KtlintCliEngine(lambda resolved: binary, cwd=tmp_path)
    options = EngineOptions(ktlint=_resolved())

    with pytest.raises(LinterLaunchError, match="Unable to launch ktlint executable") as excinfo:
        engine.lint([tmp_path / "Foo.kt"], options)
    with pytest.raises(LinterLaunchError):
        engine.apply_to_idea(tmp_path, options, globally=False)

    assert excinfo.value.executable == str(binary)


def test_release_urls_follow_distribution() -> None:
    assert release_url(_resolved("0.26.0").coordinates) == (
        "https://github.com/shyiko/ktlint/releases/download/0.26.0/ktlint"
    )
    assert release_url(_resolved("0.34.0").coordinates) == (
        "https://github.com/pinterest/ktlint/releases/download/0.34.0/ktlint"
    )


def test_resolve_executable_downloads_once(tmp_path: Path) -> None:
    downloads: list[str] = []

    def downloader(url: str, target: Path) -> None:
        downloads.append(url)
        target.write_bytes(b"#!/bin/sh\n")

    resolved = _resolved()
    first = resolve_executable(resolved, cache_dir=tmp_path, downloader=downloader)
    second = resolve_executable(resolved, cache_dir=tmp_path, downloader=downloader)

    assert first == second == cached_executable_path(resolved.coordinates, tmp_path)
    assert downloads == [release_url(resolved.coordinates)]
    assert os.access(first, os.X_OK)


def test_failed_download_leaves_no_partial_file(tmp_path: Path) -> None:
    def downloader(url: str, target: Path) -> None:
        target.write_bytes(b"partial")
        raise OSError("connection reset")

    with pytest.raises(ArtifactResolutionError, match="connection reset"):
        resolve_executable(_resolved(), cache_dir=tmp_path, downloader=downloader)

    assert [path for path in tmp_path.rglob("*") if path.is_file()] == []


def test_explicit_executable_is_used_as_is(tmp_path: Path) -> None:
    binary = _script(tmp_path / "my-ktlint", "exit 0\n")

    assert resolve_executable(_resolved(), cache_dir=tmp_path / "cache", executable=binary) == binary
    with pytest.raises(ArtifactResolutionError, match="not found"):
        resolve_executable(_resolved(), cache_dir=tmp_path / "cache", executable=tmp_path / "missing")
