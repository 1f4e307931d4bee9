from __future__ import annotations

import secrets

from fastapi import HTTPException

from .services.recorder import Recorder
from .settings import SETTINGS


def get_recorder() -> Recorder:
    from .services import singletons  # noqa: WPS433

    if singletons.RECORDER is None:
        raise RuntimeError("recorder_not_ready")
    return singletons.RECORDER


def require_access_key(access_key: str | None) -> None:
    expected = SETTINGS.access_key
    if not expected or not access_key or not secrets.compare_digest(access_key.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=401, detail={"error": {"code": "unauthorized", "message": "Invalid access key"}})
