#
# Job identifiers (ULID text form).
#
"""Time-sortable job identifiers.

A generated identifier is a 26 character ULID: 48 bits of millisecond
timestamp followed by 80 random bits, encoded in Crockford base32. The
textual form doubles as the job directory name, so lexicographic order of
directory names is creation order.

Identifiers parsed from arbitrary text (URL segments, directory names) are
kept verbatim; whether they name a job is decided by the filesystem.
"""

from __future__ import annotations

import os
import threading
import time
from datetime import datetime, timezone

ENCODING = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
DECODING = {ch: index for index, ch in enumerate(ENCODING)}

TIMESTAMP_LEN = 10
RANDOM_LEN = 16
ULID_LEN = TIMESTAMP_LEN + RANDOM_LEN

_RANDOM_BITS = 80
_RANDOM_MAX = (1 << _RANDOM_BITS) - 1
_TIMESTAMP_MAX = (1 << 48) - 1


def _encode(value: int, length: int) -> str:
    chars = []
    for _ in range(length):
        chars.append(ENCODING[value & 0x1F])
        value >>= 5
    return "".join(reversed(chars))


def _decode(text: str) -> int | None:
    value = 0
    for ch in text:
        digit = DECODING.get(ch)
        if digit is None:
            return None
        value = (value << 5) | digit
    return value


class _MonotonicGenerator:
    # Within one millisecond the random part is incremented instead of redrawn,
    # so identifiers from this process never sort out of creation order.
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = 0

    def next(self) -> str:
        with self._lock:
            now_ms = time.time_ns() // 1_000_000
            if now_ms <= self._last_ms:
                now_ms = self._last_ms
                if self._last_random >= _RANDOM_MAX:
                    raise OverflowError("ulid random component overflow")
                random_part = self._last_random + 1
            else:
                random_part = int.from_bytes(os.urandom(_RANDOM_BITS // 8), "big")
            if now_ms > _TIMESTAMP_MAX:
                raise OverflowError("ulid timestamp overflow")
            self._last_ms = now_ms
            self._last_random = random_part
        return _encode(now_ms, TIMESTAMP_LEN) + _encode(random_part, RANDOM_LEN)


_GENERATOR = _MonotonicGenerator()


class JobId:
    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    @classmethod
    def generate(cls) -> "JobId":
        return cls(_GENERATOR.next())

    @classmethod
    def parse(cls, text: str) -> "JobId":
        return cls(text)

    def to_string(self) -> str:
        return self._value

    def timestamp(self) -> datetime | None:
        """Creation time encoded in a well-formed ULID, else None."""

        if len(self._value) != ULID_LEN:
            return None
        millis = _decode(self._value[:TIMESTAMP_LEN])
        if millis is None or millis > _TIMESTAMP_MAX:
            return None
        if _decode(self._value[TIMESTAMP_LEN:]) is None:
            return None
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"JobId({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JobId):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: "JobId") -> bool:
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._value)
