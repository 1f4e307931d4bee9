#
# Error helpers.
#
from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException


def http_error(status_code: int, code: str, message: str) -> NoReturn:
    raise HTTPException(status_code=status_code, detail={"error": {"code": code, "message": message}})


def job_not_found(job_id: object) -> NoReturn:
    http_error(404, "not_found", f"Job {job_id} not found")
