#
# Job path helpers (filesystem layout).
#
from __future__ import annotations

import errno
import logging
import os
from pathlib import Path, PurePath
from typing import Any, BinaryIO

from ..utils.fs import write_json, write_text
from .job_id import JobId

logger = logging.getLogger(__name__)

INFO_DIR = "info"
INVOCATION_JSON = f"{INFO_DIR}/invocation.json"
STDOUT_TXT = f"{INFO_DIR}/stdout.txt"
STDERR_TXT = f"{INFO_DIR}/stderr.txt"
PID_TXT = f"{INFO_DIR}/pid.txt"


class JobDir:
    """Filesystem access scoped to one job's directory."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _join(self, relative: str | PurePath) -> Path:
        if PurePath(relative).is_absolute():
            raise OSError(errno.EINVAL, "job dir path must be relative", str(relative))
        return self._path / relative

    def create_subpath(self, relative: str | PurePath) -> Path:
        target = self._join(relative)
        target.mkdir(parents=True, exist_ok=True)
        return target

    def create_file(self, relative: str | PurePath) -> BinaryIO:
        return self._join(relative).open("wb")

    def open_file(self, relative: str | PurePath) -> BinaryIO:
        return self._join(relative).open("rb")

    def write_text(self, relative: str | PurePath, text: str) -> None:
        write_text(self._join(relative), text)

    def write_json(self, relative: str | PurePath, obj: Any) -> None:
        write_json(self._join(relative), obj)

    def list_output_file_names(self) -> list[str]:
        # Unreadable directory and empty directory look the same to callers.
        names: list[str] = []
        try:
            entries = os.scandir(self._path)
        except OSError as exc:
            logger.debug("list_output_file_names failed: %s (%s)", self._path, exc)
            return names
        with entries:
            for entry in entries:
                if entry.name.startswith("."):
                    continue
                try:
                    if entry.is_file():
                        names.append(entry.name)
                except OSError:
                    continue
        return names

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JobDir):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"JobDir({str(self._path)!r})"


class WorkDir:
    """Root directory holding one subdirectory per job."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def resolve(self, job_id: JobId) -> JobDir:
        return JobDir(self._path / str(job_id))

    def list(self) -> list[tuple[JobId, JobDir]]:
        found: list[tuple[JobId, JobDir]] = []
        try:
            entries = os.scandir(self._path)
        except OSError as exc:
            logger.debug("work dir listing failed: %s (%s)", self._path, exc)
            return found
        with entries:
            for entry in entries:
                try:
                    if not entry.is_dir():
                        continue
                except OSError as exc:
                    logger.debug("skip job dir entry %s (%s)", entry.path, exc)
                    continue
                found.append((JobId.parse(entry.name), JobDir(Path(entry.path))))
        return found
