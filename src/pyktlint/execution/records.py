# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Persisted execution records backing up-to-date checks."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import TaskOutcome

LOGGER = logging.getLogger(__name__)

RECORD_SUFFIX: Final[str] = ".record.json"
_CHUNK_SIZE: Final[int] = 1 << 16
MISSING_FINGERPRINT: Final[str] = "missing"


class ExecutionRecord(BaseModel):
    """Snapshot of a task's inputs and outcome from its latest attempt."""

    model_config = ConfigDict(frozen=True)

    task: str
    fingerprints: dict[str, str] = Field(default_factory=dict)
    config: dict[str, Any] = Field(default_factory=dict)
    outcome: TaskOutcome
    inputs_modified: bool = False

    def matches(self, fingerprints: Mapping[str, str], config: Mapping[str, Any]) -> bool:
        """Return whether ``fingerprints`` and ``config`` equal the recorded ones."""

        return self.fingerprints == dict(fingerprints) and self.config == dict(config)

    @property
    def reusable(self) -> bool:
        """Return whether the record can justify skipping or incremental work."""

        return self.outcome is TaskOutcome.SUCCESS and not self.inputs_modified

    def changed_keys(self, fingerprints: Mapping[str, str]) -> set[str]:
        """Return keys in ``fingerprints`` that are new or differ from the record."""

        return {key for key, digest in fingerprints.items() if self.fingerprints.get(key) != digest}


def fingerprint_file(path: Path) -> str:
    """Return the SHA-256 digest of ``path``, or a marker when it cannot be read."""

    hasher = hashlib.sha256()
    try:
        with path.open("rb") as handle:
            for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
                hasher.update(chunk)
    except OSError:
        return MISSING_FINGERPRINT
    return hasher.hexdigest()


def fingerprint_key(path: Path, project_root: Path) -> str:
    """Return the project-relative ``/`` key used for ``path`` in records."""

    try:
        return path.relative_to(project_root).as_posix()
    except ValueError:
        return path.as_posix()


def fingerprint_files(files: Iterable[Path], project_root: Path) -> dict[str, str]:
    """Return ``{key: digest}`` for ``files`` keyed by :func:`fingerprint_key`."""

    return {fingerprint_key(path, project_root): fingerprint_file(path) for path in files}


class RecordStore:
    """Read and atomically write :class:`ExecutionRecord` files keyed by task name."""

    def __init__(self, directory: Path) -> None:
        self._dir = directory

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, task_name: str) -> Path:
        """Return the record file location for ``task_name``."""

        return self._dir / f"{task_name}{RECORD_SUFFIX}"

    def load(self, task_name: str) -> ExecutionRecord | None:
        """Return the stored record, or ``None`` when missing or unreadable.

        Args:
            task_name: Task whose record should be read.

        Returns:
            ExecutionRecord | None: Parsed record. Corrupt JSON, schema
            mismatches and I/O errors all count as a missing record.
        """

        path = self.path_for(task_name)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.debug("ignoring unreadable record %s: %s", path, exc)
            return None
        try:
            record = ExecutionRecord.model_validate(raw)
        except ValidationError as exc:
            LOGGER.debug("ignoring invalid record %s: %s", path, exc)
            return None
        return record if record.task == task_name else None

    def store(self, record: ExecutionRecord) -> None:
        """Persist ``record`` via a temporary file renamed into place.

        Write failures are logged and otherwise ignored; the next run then
        finds no valid record and executes in full.
        """

        target = self.path_for(record.task)
        payload = json.dumps(record.model_dump(mode="json"), indent=2, sort_keys=True)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            handle, temp_name = tempfile.mkstemp(prefix=f".{record.task}.", suffix=".tmp", dir=self._dir)
            try:
                with os.fdopen(handle, "w", encoding="utf-8") as stream:
                    stream.write(payload)
                os.replace(temp_name, target)
            except OSError:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            LOGGER.warning("unable to write execution record %s: %s", target, exc)

    def invalidate(self, task_name: str) -> None:
        """Remove the record for ``task_name`` so the next run executes."""

        try:
            self.path_for(task_name).unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.warning("unable to remove execution record for %s: %s", task_name, exc)


__all__ = [
    "ExecutionRecord",
    "MISSING_FINGERPRINT",
    "RECORD_SUFFIX",
    "RecordStore",
    "fingerprint_file",
    "fingerprint_files",
    "fingerprint_key",
]
