"""Filesystem helpers for generated artifacts."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

__all__ = ["atomic_write_json", "atomic_write_text"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write `content` via a sibling temp file and `os.replace`.

    Later pipeline steps read what earlier ones wrote, so a reader never
    sees a truncated file. Parent directories are created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def atomic_write_json(path: Path, payload: object) -> None:
    """Pretty-printed, newline-terminated JSON; key order is preserved."""
    atomic_write_text(path, json.dumps(payload, indent=2, ensure_ascii=False) + "\n")
