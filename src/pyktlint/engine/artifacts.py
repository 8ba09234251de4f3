# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate or download the ktlint executable matching resolved coordinates."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import threading
import urllib.request
from collections.abc import Callable
from pathlib import Path
from typing import Final

from ..errors import KtlintError
from ..versioning import PINTEREST_GROUP, SHYIKO_GROUP, ArtifactCoordinates, ResolvedKtlint

LOGGER = logging.getLogger(__name__)

DEFAULT_CACHE_DIR: Final[Path] = Path.home() / ".cache" / "pyktlint"
_RELEASE_REPOSITORIES: Final[dict[str, str]] = {
    SHYIKO_GROUP: "shyiko/ktlint",
    PINTEREST_GROUP: "pinterest/ktlint",
}
_DOWNLOAD_LOCK = threading.Lock()

Downloader = Callable[[str, Path], None]


class ArtifactResolutionError(KtlintError):
    """Raised when no ktlint executable can be provided for the coordinates."""


def release_url(coordinates: ArtifactCoordinates) -> str:
    """Return the GitHub release URL of the standalone ktlint binary.

    Raises:
        ArtifactResolutionError: If the coordinates belong to an unknown group.
    """

    repository = _RELEASE_REPOSITORIES.get(coordinates.group)
    if repository is None:
        raise ArtifactResolutionError(f"No download location known for {coordinates}")
    return f"https://github.com/{repository}/releases/download/{coordinates.version}/{coordinates.artifact}"


def cached_executable_path(coordinates: ArtifactCoordinates, cache_dir: Path) -> Path:
    """Return where the executable for ``coordinates`` is cached."""

    return cache_dir / coordinates.group / coordinates.version / coordinates.artifact


def _urllib_download(url: str, target: Path) -> None:
    with urllib.request.urlopen(url) as response, target.open("wb") as handle:  # nosec B310 - fixed https URL
        shutil.copyfileobj(response, handle)


def resolve_executable(
    resolved: ResolvedKtlint,
    *,
    cache_dir: Path = DEFAULT_CACHE_DIR,
    executable: Path | None = None,
    downloader: Downloader | None = None,
) -> Path:
    """Return a runnable ktlint executable for ``resolved``.

    Args:
        resolved: Version resolution produced by :class:`VersionPolicy`.
        cache_dir: Directory holding downloaded binaries.
        executable: Explicit executable configured by the user; used as-is.
        downloader: Optional download hook used by tests.

    Returns:
        Path: Executable path.

    Raises:
        ArtifactResolutionError: If the explicit executable is missing or the
            download fails.
    """

    if executable is not None:
        candidate = Path(shutil.which(str(executable)) or executable).expanduser()
        if not candidate.is_file():
            raise ArtifactResolutionError(f"Configured ktlint executable not found: {executable}")
        return candidate

    target = cached_executable_path(resolved.coordinates, cache_dir)
    with _DOWNLOAD_LOCK:
        if target.is_file():
            return target
        url = release_url(resolved.coordinates)
        LOGGER.info("downloading %s from %s", resolved.coordinates, url)
        target.parent.mkdir(parents=True, exist_ok=True)
        partial = target.with_name(f".{target.name}.{os.getpid()}.part")
        try:
            (downloader or _urllib_download)(url, partial)
            partial.chmod(partial.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)
            os.replace(partial, target)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise ArtifactResolutionError(f"Unable to download {resolved.coordinates} from {url}: {exc}") from exc
    return target


__all__ = [
    "ArtifactResolutionError",
    "DEFAULT_CACHE_DIR",
    "Downloader",
    "cached_executable_path",
    "release_url",
    "resolve_executable",
]
