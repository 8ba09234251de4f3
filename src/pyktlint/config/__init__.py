# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loader import ConfigLoader, load_config
from .models import (
    ConfigError,
    FileTreeConfig,
    FilterConfig,
    KtlintConfig,
    ReporterType,
    SourceSetConfig,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "FileTreeConfig",
    "FilterConfig",
    "KtlintConfig",
    "ReporterType",
    "SourceSetConfig",
    "load_config",
]
