from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path

UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


@dataclass(frozen=True)
class DiskStat:
    available: int
    total: int
    used: int

    @classmethod
    def for_path(cls, path: str | Path) -> "DiskStat | None":
        """Space of the filesystem holding `path`, or None if it cannot be read."""

        try:
            st = os.statvfs(path)
        except (OSError, ValueError):
            return None
        available = st.f_bavail * st.f_frsize
        total = st.f_blocks * st.f_frsize
        used = total - available
        if used < 0:
            return None
        return cls(available=available, total=total, used=used)


def humanize_byte_size(size: int) -> str:
    # Decimal units, three decimals: 1234 -> "1.234KB".
    exponent = 0
    if size > 0:
        exponent = int(math.floor(math.log10(size) / 3))
    exponent = max(0, min(exponent, len(UNITS) - 1))
    return f"{size / 1000 ** exponent:.3f}{UNITS[exponent]}"
