# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reusable Typer option declarations and their normalisation."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer

from .shared import CLIError

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Print debug diagnostics."),
]
PROPERTY_OPTION = Annotated[
    list[str] | None,
    typer.Option(
        "--property",
        "-P",
        help="Build property as key=value (repeatable).",
    ),
]


def parse_properties(values: Sequence[str] | None) -> dict[str, str]:
    """Return ``key=value`` entries as a mapping; later keys win.

    Raises:
        CLIError: If an entry has no ``=`` or an empty key.
    """

    properties: dict[str, str] = {}
    for entry in values or ():
        key, separator, value = entry.partition("=")
        key = key.strip()
        if not separator or not key:
            raise CLIError(f"Invalid property '{entry}', expected key=value", exit_code=2)
        properties[key] = value
    return properties


__all__ = ["DEBUG_OPTION", "EMOJI_OPTION", "PROPERTY_OPTION", "ROOT_OPTION", "parse_properties"]
