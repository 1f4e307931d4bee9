from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest

from backend.app.services.job_id import JobId
from backend.app.services.job_paths import JobDir, WorkDir


def test_resolve_is_a_pure_join(tmp_path: Path):
    work_dir = WorkDir(tmp_path / "missing")
    job_dir = work_dir.resolve(JobId.parse("01ABC"))
    assert job_dir.path == tmp_path / "missing" / "01ABC"
    assert not (tmp_path / "missing").exists()


def test_list_missing_root_is_empty(tmp_path: Path):
    assert WorkDir(tmp_path / "missing").list() == []


def test_list_returns_subdirectories_verbatim(tmp_path: Path):
    (tmp_path / "01AAA").mkdir()
    (tmp_path / "not-an-id").mkdir()
    (tmp_path / "stray.txt").write_text("x", encoding="utf-8")

    listed = WorkDir(tmp_path).list()
    ids = sorted(str(job_id) for job_id, _ in listed)
    assert ids == ["01AAA", "not-an-id"]
    for job_id, job_dir in listed:
        assert job_dir.path == tmp_path / str(job_id)


def test_create_subpath_makes_parents(tmp_path: Path):
    job_dir = JobDir(tmp_path / "job")
    created = job_dir.create_subpath("info/nested")
    assert created.is_dir()
    assert created == tmp_path / "job" / "info" / "nested"
    # Idempotent.
    job_dir.create_subpath("info/nested")


def test_absolute_paths_are_rejected(tmp_path: Path):
    job_dir = JobDir(tmp_path / "job")
    with pytest.raises(OSError) as excinfo:
        job_dir.create_subpath(tmp_path / "elsewhere")
    assert excinfo.value.errno == errno.EINVAL
    with pytest.raises(OSError) as excinfo:
        job_dir.create_file("/tmp/evil.txt")
    assert excinfo.value.errno == errno.EINVAL
    with pytest.raises(OSError) as excinfo:
        job_dir.open_file("/etc/passwd")
    assert excinfo.value.errno == errno.EINVAL
    assert not (tmp_path / "elsewhere").exists()


def test_create_file_truncates_and_open_file_reads(tmp_path: Path):
    job_dir = JobDir(tmp_path)
    with job_dir.create_file("out.bin") as f:
        f.write(b"first version")
    with job_dir.create_file("out.bin") as f:
        f.write(b"2")
    with job_dir.open_file("out.bin") as f:
        assert f.read() == b"2"


def test_open_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        JobDir(tmp_path).open_file("info/pid.txt")


def test_write_text_is_scoped_and_leaves_no_temp_file(tmp_path: Path):
    job_dir = JobDir(tmp_path)
    job_dir.create_subpath("info")
    job_dir.write_text("info/pid.txt", "123\n")
    assert (tmp_path / "info" / "pid.txt").read_text(encoding="utf-8") == "123\n"
    assert sorted(os.listdir(tmp_path / "info")) == ["pid.txt"]


def test_output_file_names_skip_hidden_and_directories(tmp_path: Path):
    (tmp_path / "info").mkdir()
    (tmp_path / "info" / "stdout.txt").write_text("", encoding="utf-8")
    (tmp_path / "video.mp4").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("n", encoding="utf-8")
    (tmp_path / ".hidden").write_text("h", encoding="utf-8")
    (tmp_path / "subdir").mkdir()

    assert sorted(JobDir(tmp_path).list_output_file_names()) == ["notes.txt", "video.mp4"]


def test_output_file_names_of_missing_dir_is_empty(tmp_path: Path):
    assert JobDir(tmp_path / "gone").list_output_file_names() == []


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs an unprivileged posix user")
def test_output_file_names_of_unreadable_dir_is_empty(tmp_path: Path):
    job = tmp_path / "job"
    job.mkdir()
    (job / "result.txt").write_text("x", encoding="utf-8")
    job.chmod(0)
    try:
        assert JobDir(job).list_output_file_names() == []
    finally:
        job.chmod(0o755)
