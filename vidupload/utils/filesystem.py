"""Filesystem helper utilities."""

from __future__ import annotations

import os
from pathlib import Path


def safe_basename(filename: str) -> str:
    """Strip any directory components (POSIX or Windows style) from a client filename."""
    return os.path.basename(filename.replace("\\", "/")).strip()


def discard_partial(path: Path) -> None:
    """Best-effort removal of a partially written file."""
    try:
        path.unlink(missing_ok=True)
    except OSError:
        # The caller is already reporting a failure for this file.
        return
