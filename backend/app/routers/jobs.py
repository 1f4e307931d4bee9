from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Response
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..deps import get_recorder, require_access_key
from ..services.disk_stat import DiskStat, humanize_byte_size
from ..services.job import Job
from ..services.job_id import JobId
from ..services.media import first_media_file_name, sort_output_file_names
from ..services.recorder import Recorder
from ..settings import SETTINGS
from ..utils.errors import http_error, job_not_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])

JOB_ID_RE = re.compile(r"^[0-9A-Z]+$")


def lookup_job(recorder: Recorder, job_id: str) -> Job:
    if not JOB_ID_RE.match(job_id):
        job_not_found(job_id)
    job = recorder.job(JobId.parse(job_id))
    if job is None:
        job_not_found(job_id)
    return job


def created_at_iso(job_id: JobId) -> str | None:
    ts = job_id.timestamp()
    return ts.isoformat() if ts else None


class SpawnJobRequest(BaseModel):
    access_key: str
    args: list[str] = Field(default_factory=list)


class JobSummary(BaseModel):
    job_id: str
    created_at: str | None = None


class JobListItem(JobSummary):
    media_file_name: str | None = None


class DiskUsage(BaseModel):
    available: str
    total: str
    used: str


class JobListResponse(BaseModel):
    items: list[JobListItem]
    total: int
    disk: DiskUsage


class JobDetail(JobSummary):
    running: bool
    invocation: dict[str, Any]
    file_names: list[str]


class DeleteJobsRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_key: str
    job_ids: list[str] = Field(default_factory=list)


class PruneRequest(BaseModel):
    access_key: str


class JobIdsResponse(BaseModel):
    job_ids: list[str]


def disk_usage(path: Path) -> DiskUsage:
    stat = DiskStat.for_path(path)
    if stat is None:
        return DiskUsage(available="N/A", total="N/A", used="N/A")
    return DiskUsage(
        available=humanize_byte_size(stat.available),
        total=humanize_byte_size(stat.total),
        used=humanize_byte_size(stat.used),
    )


@router.get("", response_model=JobListResponse)
def list_jobs(recorder: Recorder = Depends(get_recorder)):
    items = [
        JobListItem(
            job_id=str(job.id),
            created_at=created_at_iso(job.id),
            media_file_name=first_media_file_name(job.output_file_names()),
        )
        for job in recorder.jobs()
    ]
    items.sort(key=lambda x: x.job_id, reverse=True)
    return JobListResponse(items=items, total=len(items), disk=disk_usage(recorder.work_dir_path))


@router.post("", response_model=JobSummary, status_code=201)
def spawn_job(payload: SpawnJobRequest, recorder: Recorder = Depends(get_recorder)):
    require_access_key(payload.access_key)
    args = [a.strip() for a in payload.args if a.strip()]
    if not args:
        http_error(422, "no_args", "At least one argument is required")
    try:
        job = recorder.spawn_job(SETTINGS.download_command, args)
    except OSError as e:
        logger.error("spawn_job failed: %s", e)
        http_error(500, "spawn_failed", str(e))
    return JobSummary(job_id=str(job.id), created_at=created_at_iso(job.id))


@router.delete("", response_model=JobIdsResponse)
def delete_jobs(payload: DeleteJobsRequest, recorder: Recorder = Depends(get_recorder)):
    require_access_key(payload.access_key)
    job_ids = [JobId.parse(j) for j in payload.job_ids if JOB_ID_RE.match(j)]
    deleted = recorder.delete_jobs(job_ids)
    return JobIdsResponse(job_ids=[str(j) for j in deleted])


@router.post("/prune", response_model=JobIdsResponse)
def prune_jobs(payload: PruneRequest, recorder: Recorder = Depends(get_recorder)):
    require_access_key(payload.access_key)
    removed = recorder.prune()
    return JobIdsResponse(job_ids=[str(j) for j in removed])


@router.get("/{job_id}", response_model=JobDetail)
def get_job(job_id: str, recorder: Recorder = Depends(get_recorder)):
    job = lookup_job(recorder, job_id)
    return JobDetail(
        job_id=str(job.id),
        created_at=created_at_iso(job.id),
        running=job.is_running(),
        invocation=job.invocation() or {},
        file_names=sort_output_file_names(job.output_file_names()),
    )


@router.head("/{job_id}/process")
def head_job_process(job_id: str, recorder: Recorder = Depends(get_recorder)):
    job = recorder.job(JobId.parse(job_id)) if JOB_ID_RE.match(job_id) else None
    if job is not None and job.is_running():
        return Response(status_code=200)
    return Response(status_code=204)


@router.get("/{job_id}/files/{file_name:path}")
def get_job_file(job_id: str, file_name: str, recorder: Recorder = Depends(get_recorder)):
    job = lookup_job(recorder, job_id)
    root = job.path.resolve()
    file_path = (root / file_name).resolve()
    if not file_path.is_relative_to(root) or not file_path.is_file():
        http_error(404, "not_found", "File not found")
    media = "text/plain; charset=utf-8" if file_name.endswith(".txt") else None
    return FileResponse(file_path, media_type=media, filename=file_path.name)
