from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def write_text(path: Path, text: str) -> None:
    # Readers see either the old file or the complete new one.
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


def write_json(path: Path, obj: Any, *, indent: int | None = None) -> None:
    text = json.dumps(obj, ensure_ascii=False, indent=indent, sort_keys=False)
    write_text(path, text + "\n")
