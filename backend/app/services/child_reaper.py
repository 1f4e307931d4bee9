#
# Process-wide zombie reaper.
#
"""Background reaping of exited child processes.

Spawned jobs are never waited on by the code that started them, so their
exit status has to be collected somewhere or they linger as zombies (and a
zombie still answers the signal-0 liveness probe). One daemon thread drains
`waitpid(-1, WNOHANG)` whenever SIGCHLD arrives, and on a poll interval as a
fallback for when the handler cannot be installed (non-main thread) or a
signal is coalesced.
"""

from __future__ import annotations

import logging
import os
import signal
import threading

logger = logging.getLogger(__name__)

_START_LOCK = threading.Lock()
_WAKEUP = threading.Event()
_THREAD: threading.Thread | None = None


def reap_exited_children() -> int:
    """Collect every exited child without blocking; returns how many."""

    reaped = 0
    while True:
        try:
            pid, _status = os.waitpid(-1, os.WNOHANG)
        except ChildProcessError:
            return reaped
        except InterruptedError:
            continue
        if pid <= 0:
            return reaped
        reaped += 1
        logger.debug("reaped child pid=%s", pid)


def _on_sigchld(_signum: int, _frame: object) -> None:
    _WAKEUP.set()


def _reaper_loop(poll_interval: float) -> None:
    while True:
        _WAKEUP.wait(timeout=poll_interval)
        _WAKEUP.clear()
        try:
            reap_exited_children()
        except OSError as exc:
            logger.warning("child reaper waitpid failed: %s", exc)


def _install_sigchld_handler() -> bool:
    if threading.current_thread() is not threading.main_thread():
        logger.info("child reaper started off the main thread; relying on polling")
        return False
    signal.signal(signal.SIGCHLD, _on_sigchld)
    return True


def start_child_reaper(*, poll_interval: float = 5.0) -> threading.Thread:
    """Start the reaper thread once per process; later calls return it."""

    global _THREAD
    with _START_LOCK:
        if _THREAD is not None and _THREAD.is_alive():
            return _THREAD
        _install_sigchld_handler()
        _THREAD = threading.Thread(
            target=_reaper_loop,
            kwargs={"poll_interval": max(0.05, float(poll_interval))},
            name="child-reaper",
            daemon=True,
        )
        _THREAD.start()
        # Children that exited before the handler existed.
        _WAKEUP.set()
        return _THREAD
