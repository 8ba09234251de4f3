# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the version policy, executor and runner."""

from __future__ import annotations

from collections.abc import Sequence


class KtlintError(RuntimeError):
    """Base class for errors raised while configuring or running ktlint tasks."""


class UnsupportedVersionError(KtlintError):
    """Raised when the configured ktlint version cannot be used at all."""

    def __init__(self, message: str, *, version: str) -> None:
        """Initialise the error with the offending version string.

        Args:
            message: Human-readable explanation shown to the user.
            version: Raw version string taken from configuration.
        """

        super().__init__(message)
        self.version = version


class UnsupportedCapabilityError(KtlintError):
    """Raised when a requested feature is unavailable at the configured version."""

    def __init__(self, message: str, *, version: str, required: str) -> None:
        """Initialise the error with the configured and required versions.

        Args:
            message: Human-readable explanation shown to the user.
            version: Raw version string taken from configuration.
            required: Minimum version providing the capability.
        """

        super().__init__(message)
        self.version = version
        self.required = required


class LinterExecutionError(KtlintError):
    """Raised when the ktlint executable exits with a fatal status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str | None) -> None:
        """Capture the failing command and its diagnostics.

        Args:
            command: Command line that was executed.
            returncode: Exit status reported by the process.
            stderr: Captured standard error stream, when available.
        """

        detail = (stderr or "").strip() or "<none>"
        super().__init__(f"ktlint exited with status {returncode}. stderr: {detail}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


class LinterLaunchError(KtlintError):
    """Raised when the ktlint executable cannot be started at all."""

    def __init__(self, executable: str, reason: OSError) -> None:
        super().__init__(f"Unable to launch ktlint executable {executable}: {reason.strerror or reason}")
        self.executable = executable


class TaskNotFoundError(KtlintError):
    """Raised when a requested task name is not registered on the project."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Task '{name}' not found in project.")
        self.name = name


__all__ = [
    "KtlintError",
    "LinterExecutionError",
    "LinterLaunchError",
    "TaskNotFoundError",
    "UnsupportedCapabilityError",
    "UnsupportedVersionError",
]
