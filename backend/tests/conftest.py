from __future__ import annotations

import os
import sys
import tempfile
import time
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

TEST_ACCESS_KEY = "test-access-key"


def _init_test_env() -> None:
    """
    Initialize isolated test env before importing backend modules.

    This must run at module import time, because backend settings are created
    during module import and read env vars only once.
    """

    root = Path(tempfile.mkdtemp(prefix="jobrecorder-pytest-"))
    os.environ["RECORDER_WORK_DIR"] = str(root / "jobs")
    os.environ["RECORDER_ACCESS_KEY"] = TEST_ACCESS_KEY
    # Jobs spawned through the API run the test interpreter instead of a downloader.
    os.environ["RECORDER_DOWNLOAD_COMMAND"] = sys.executable
    os.environ["RECORDER_REAPER_POLL_INTERVAL_SECONDS"] = "0.1"


_init_test_env()


@pytest.fixture(scope="session", autouse=True)
def child_reaper():
    from backend.app.services.child_reaper import start_child_reaper  # noqa: WPS433

    return start_child_reaper(poll_interval=0.1)


@pytest.fixture(scope="session")
def client():
    from backend.app.main import app  # noqa: WPS433

    return TestClient(app)


@pytest.fixture
def access_key() -> str:
    return TEST_ACCESS_KEY


def _wait_until(predicate: Callable[[], bool], *, timeout: float = 10.0, interval: float = 0.05) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def _gated_script(body: str = "") -> str:
    """Python source that blocks until `.release` appears in its cwd, then runs `body`."""

    lines = [
        "import os, time",
        "deadline = time.time() + 60",
        "while not os.path.exists('.release') and time.time() < deadline:",
        "    time.sleep(0.02)",
    ]
    if body:
        lines.append(body)
    return "\n".join(lines)


@pytest.fixture
def wait_until():
    return _wait_until


@pytest.fixture
def gated_script():
    return _gated_script


@pytest.fixture
def release():
    def _release(job_path: Path) -> None:
        (job_path / ".release").write_text("", encoding="utf-8")

    return _release
