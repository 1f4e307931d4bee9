from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI

from .exceptions import install_exception_handlers
from .routers import jobs, record
from .services.child_reaper import start_child_reaper
from .services.recorder import Recorder
from .settings import SETTINGS


def create_app() -> FastAPI:
    SETTINGS.ensure_dirs()

    app = FastAPI(title="jobrecorder", version="0.1.0")
    install_exception_handlers(app)

    app.include_router(jobs.router, prefix="/api")
    app.include_router(record.router, prefix="/api")

    return app


# Spawned jobs are never waited on; the reaper collects them for the whole process lifetime.
start_child_reaper(poll_interval=SETTINGS.reaper_poll_interval_seconds)

app = create_app()


# Singletons
from .services import singletons  # noqa: WPS433,E402

RECORDER = Recorder(Path(SETTINGS.work_dir))
singletons.RECORDER = RECORDER
