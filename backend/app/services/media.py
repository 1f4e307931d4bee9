from __future__ import annotations

import mimetypes
from typing import Iterable

# Display order of output files: video, audio, image, everything else.
_MEDIA_ORDER = {"video": 0, "audio": 1, "image": 2}


def media_type(file_name: str) -> str:
    guessed, _encoding = mimetypes.guess_type(file_name, strict=False)
    if not guessed:
        return "application"
    return guessed.split("/", 1)[0]


def sort_output_file_names(file_names: Iterable[str]) -> list[str]:
    return sorted(file_names, key=lambda name: (_MEDIA_ORDER.get(media_type(name), 3), name))


def first_media_file_name(file_names: Iterable[str]) -> str | None:
    for name in sorted(file_names):
        if media_type(name) in ("audio", "video"):
            return name
    return None
