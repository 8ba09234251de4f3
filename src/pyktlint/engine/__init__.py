# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""ktlint engine boundary and its command line implementation."""

from __future__ import annotations

from .artifacts import ArtifactResolutionError, resolve_executable
from .base import EngineOptions, LintEngine, LintError
from .cli import KtlintCliEngine

__all__ = [
    "ArtifactResolutionError",
    "EngineOptions",
    "KtlintCliEngine",
    "LintEngine",
    "LintError",
    "resolve_executable",
]
