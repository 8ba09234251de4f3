# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for source root enumeration and pattern filtering."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import write_source

from pyktlint.sources import (
    FileTree,
    PatternFilter,
    SourceCategory,
    SourceRoot,
    SourceSetResolver,
    compile_pattern,
    matches_any,
)

MAIN = SourceRoot(name="main", directories=(Path("src/main/kotlin"), Path("src/main/java")))
SCRIPTS = SourceRoot(name="kotlinScript", directories=(Path(),), category=SourceCategory.SCRIPT, recursive=False)


@pytest.mark.parametrize(
    ("pattern", "path", "expected"),
    [
        ("**/generated/**", "generated/Foo.kt", True),
        ("**/generated/**", "com/acme/generated/sub/Foo.kt", True),
        ("**/generated/**", "com/acme/Foo.kt", False),
        ("*.kt", "Foo.kt", True),
        ("*.kt", "pkg/Foo.kt", False),
        ("Fo?.kt", "Foo.kt", True),
        ("**/Foo.kt", "Foo.kt", True),
        ("pkg/", "pkg/deep/Foo.kt", True),
        ("**\\FailTest.kt", "pkg/FailTest.kt", True),
    ],
)
def test_ant_pattern_matching(pattern: str, path: str, expected: bool) -> None:
    assert bool(compile_pattern(pattern).match(path)) is expected


def test_matches_any_normalises_backslashes() -> None:
    assert matches_any("pkg\\Foo.kt", ["pkg/*.kt"])


def test_resolver_collects_kotlin_files_in_order(tmp_path: Path) -> None:
    second = write_source(tmp_path, "src/main/java/b/B.kt")
    first = write_source(tmp_path, "src/main/kotlin/a/A.kt")
    write_source(tmp_path, "src/main/kotlin/a/notes.txt")
    write_source(tmp_path, "src/main/kotlin/build.gradle.kts")

    files = SourceSetResolver(tmp_path).resolve([MAIN], category=SourceCategory.SOURCE)

    assert files == (first.resolve(), second.resolve())


def test_resolver_deduplicates_overlapping_directories(tmp_path: Path) -> None:
    source = write_source(tmp_path, "src/main/kotlin/A.kt")
    root = SourceRoot(name="main", directories=(Path("src/main/kotlin"), Path("src/main")))

    files = SourceSetResolver(tmp_path).resolve([root], category=SourceCategory.SOURCE)

    assert files == (source.resolve(),)


def test_resolver_applies_excludes(tmp_path: Path) -> None:
    kept = write_source(tmp_path, "src/main/kotlin/Kept.kt")
    write_source(tmp_path, "src/main/kotlin/FailTest.kt")
    write_source(tmp_path, "src/main/kotlin/generated/Gen.kt")

    files = SourceSetResolver(tmp_path).resolve(
        [MAIN],
        category=SourceCategory.SOURCE,
        pattern_filter=PatternFilter(excludes=("**/FailTest.kt", "**/generated/**")),
    )

    assert files == (kept.resolve(),)


def test_backslash_pattern_matches_like_forward_slash(tmp_path: Path) -> None:
    write_source(tmp_path, "src/main/kotlin/pkg/FailTest.kt")
    kept = write_source(tmp_path, "src/main/kotlin/pkg/Kept.kt")
    resolver = SourceSetResolver(tmp_path)

    forward = resolver.resolve([MAIN], category=SourceCategory.SOURCE, pattern_filter=PatternFilter(("pkg/FailTest.kt",)))
    backward = resolver.resolve(
        [MAIN],
        category=SourceCategory.SOURCE,
        pattern_filter=PatternFilter(("pkg\\FailTest.kt",)),
    )

    assert forward == backward == (kept.resolve(),)


def test_includes_restrict_candidates(tmp_path: Path) -> None:
    wanted = write_source(tmp_path, "src/main/kotlin/api/Api.kt")
    write_source(tmp_path, "src/main/kotlin/impl/Impl.kt")

    files = SourceSetResolver(tmp_path).resolve(
        [MAIN],
        category=SourceCategory.SOURCE,
        pattern_filter=PatternFilter(includes=("api/**",)),
    )

    assert files == (wanted.resolve(),)


def test_whitespace_in_paths_is_supported(tmp_path: Path) -> None:
    spaced = write_source(tmp_path, "src/main/kotlin/some package/Clean Source.kt")

    files = SourceSetResolver(tmp_path).resolve(
        [MAIN],
        category=SourceCategory.SOURCE,
        pattern_filter=PatternFilter(excludes=("other dir/**",)),
    )

    assert files == (spaced.resolve(),)


def test_missing_directories_yield_nothing(tmp_path: Path) -> None:
    assert SourceSetResolver(tmp_path).resolve([MAIN], category=SourceCategory.SOURCE) == ()


def test_script_root_is_not_recursive(tmp_path: Path) -> None:
    top = write_source(tmp_path, "build.gradle.kts")
    write_source(tmp_path, "scripts/tool.kts")
    write_source(tmp_path, "Main.kt")

    files = SourceSetResolver(tmp_path).resolve([SCRIPTS], category=SourceCategory.SCRIPT)

    assert files == (top.resolve(),)


def test_additional_script_paths(tmp_path: Path) -> None:
    top = write_source(tmp_path, "settings.gradle.kts")
    nested = write_source(tmp_path, "scripts/tool.kts")
    write_source(tmp_path, "scripts/skip/ignored.kts")

    files = SourceSetResolver(tmp_path).resolve(
        [SCRIPTS],
        [FileTree(directory=Path("scripts"), excludes=("skip/**",))],
        category=SourceCategory.SCRIPT,
    )

    assert files == (top.resolve(), nested.resolve())


def test_root_category_must_match(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not a script root"):
        SourceSetResolver(tmp_path).resolve([MAIN], category=SourceCategory.SCRIPT)
