#
# Job handle bound to one job directory.
#
"""A job is a view over its directory.

All state lives on disk (`info/invocation.json`, `info/pid.txt`, captured
streams and whatever output files the process writes), so a `Job` can be
rebuilt from its identifier at any time, from any process.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Sequence

from .job_id import JobId
from .job_paths import INFO_DIR, INVOCATION_JSON, PID_TXT, STDERR_TXT, STDOUT_TXT, JobDir

logger = logging.getLogger(__name__)


class Job:
    def __init__(self, job_id: JobId, job_dir: JobDir):
        self._job_id = job_id
        self._job_dir = job_dir

    @property
    def id(self) -> JobId:
        return self._job_id

    @property
    def path(self) -> Path:
        return self._job_dir.path

    def spawn(self, command: str, args: Sequence[str]) -> None:
        """Record the invocation and start the process in the job directory.

        The argument vector is passed to the OS as-is, no shell is involved.
        Failures propagate; a half-written directory is left for `prune`.
        """

        args = [str(a) for a in args]
        self._job_dir.create_subpath(INFO_DIR)
        self._job_dir.write_json(INVOCATION_JSON, {"command": command, "args": args})

        with self._job_dir.create_file(STDOUT_TXT) as stdout, self._job_dir.create_file(STDERR_TXT) as stderr:
            process = subprocess.Popen(
                [command, *args],
                cwd=self._job_dir.path,
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
                start_new_session=True,
            )

        self._job_dir.write_text(PID_TXT, f"{process.pid}\n")
        logger.info("spawned job %s pid=%s command=%s", self._job_id, process.pid, command)

    def pid(self) -> int | None:
        try:
            with self._job_dir.open_file(PID_TXT) as f:
                raw = f.read().decode("utf-8")
            return int(raw.strip())
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            logger.debug("job %s pid unavailable: %s", self._job_id, exc)
            return None

    def is_running(self) -> bool:
        # Fails closed: anything short of a successful signal-0 probe is "not running".
        # A recycled pid can still report a foreign process as this job.
        pid = self.pid()
        if pid is None or pid <= 0:
            return False
        try:
            os.kill(pid, 0)
        except OSError as exc:
            logger.debug("job %s pid=%s probe failed: %s", self._job_id, pid, exc)
            return False
        return True

    def invocation(self) -> dict[str, Any] | None:
        try:
            with self._job_dir.open_file(INVOCATION_JSON) as f:
                obj = json.load(f)
        except (OSError, ValueError) as exc:
            logger.debug("job %s invocation unreadable: %s", self._job_id, exc)
            return None
        return obj if isinstance(obj, dict) else None

    def output_file_names(self) -> list[str]:
        return self._job_dir.list_output_file_names()

    def delete(self) -> None:
        path = self._job_dir.path
        logger.info("removing job dir %s", path)
        # A symlinked entry is removed itself, never the tree it points at.
        if path.is_symlink():
            path.unlink()
            return
        shutil.rmtree(path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Job):
            return NotImplemented
        return self._job_id == other._job_id and self._job_dir == other._job_dir

    def __hash__(self) -> int:
        return hash((self._job_id, self._job_dir))

    def __repr__(self) -> str:
        return f"Job(id={str(self._job_id)!r}, path={str(self._job_dir.path)!r})"
