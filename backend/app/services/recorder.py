from __future__ import annotations

# Job recorder facade.
#
# Jobs are directories under one work dir; there is no database and no
# in-process lock. Every read is a point-in-time snapshot of the tree, and
# concurrent spawns/deletes from other threads or processes may or may not be
# observed by a listing. `prune` is idempotent and safe to re-run.

import logging
import pathlib
import typing

from .job import Job
from .job_id import JobId
from .job_paths import WorkDir

logger = logging.getLogger(__name__)


class Recorder:
    def __init__(self, work_dir_path: pathlib.Path):
        self._work_dir = WorkDir(pathlib.Path(work_dir_path))

    @property
    def work_dir_path(self) -> pathlib.Path:
        return self._work_dir.path

    def spawn_job(self, command: str, args: typing.Sequence[str]) -> Job:
        job_id = JobId.generate()
        job = Job(job_id, self._work_dir.resolve(job_id))
        job.spawn(command, args)
        return job

    def job(self, job_id: JobId) -> Job | None:
        job_dir = self._work_dir.resolve(job_id)
        if not job_dir.path.is_dir():
            return None
        return Job(job_id, job_dir)

    def jobs(self) -> list[Job]:
        return [Job(job_id, job_dir) for job_id, job_dir in self._work_dir.list()]

    def prunable_jobs(self) -> list[Job]:
        # Only finished jobs without any output file are garbage; a job with
        # outputs is kept forever.
        return [job for job in self.jobs() if not job.is_running() and not job.output_file_names()]

    def prune(self) -> list[JobId]:
        # Stops at the first failed deletion.
        removed: list[JobId] = []
        for job in self.prunable_jobs():
            job.delete()
            removed.append(job.id)
        if removed:
            logger.info("pruned %d job dir(s) under %s", len(removed), self._work_dir.path)
        return removed

    def delete_jobs(self, job_ids: typing.Iterable[JobId]) -> list[JobId]:
        deleted: list[JobId] = []
        for job_id in job_ids:
            job = self.job(job_id)
            if job is None:
                continue
            job.delete()
            deleted.append(job_id)
        return deleted
