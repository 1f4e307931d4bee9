from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .services.disk_stat import DiskStat, humanize_byte_size
from .services.recorder import Recorder
from .settings import SETTINGS


def _gc(recorder: Recorder, *, dry_run: bool) -> int:
    if dry_run:
        for job in recorder.prunable_jobs():
            print(f"[dry-run] would remove job dir {job.path}")
        return 0
    try:
        removed = recorder.prune()
    except OSError as exc:
        print(f"gc failed: {exc}", file=sys.stderr)
        return 1
    for job_id in removed:
        print(f"[gc] removed job {job_id}")
    return 0


def _disk(recorder: Recorder) -> int:
    stat = DiskStat.for_path(recorder.work_dir_path)
    if stat is None:
        print(f"disk stats unavailable for {recorder.work_dir_path}", file=sys.stderr)
        return 1
    print(f"available: {humanize_byte_size(stat.available)}")
    print(f"used: {humanize_byte_size(stat.used)}")
    print(f"total: {humanize_byte_size(stat.total)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="jobrecorder", description="Job recorder maintenance")
    ap.add_argument("--work-dir", default=None, help=f"Job root (default: {SETTINGS.work_dir})")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    p_gc = sub.add_parser("gc", help="Remove finished job dirs that have no output files")
    p_gc.add_argument("--dry-run", action="store_true")
    sub.add_parser("disk", help="Show disk usage of the job root")

    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    recorder = Recorder(Path(args.work_dir or SETTINGS.work_dir))
    if args.command == "gc":
        return _gc(recorder, dry_run=args.dry_run)
    return _disk(recorder)


if __name__ == "__main__":
    raise SystemExit(main())
