"""Module layer — Directory scanner.

Lists candidate module paths: one per immediate child of the modules root.
Nothing is filtered here; files and broken entries surface later as manifest
failures so they are reported per candidate.
"""

from __future__ import annotations

import os
from pathlib import Path

from auditum.config import Settings, get_settings
from auditum.exceptions import DirectoryUnreadableError


def default_modules_root(settings: Settings | None = None) -> Path:
    """Return the configured modules root (``AUDITUM_MODULES`` or ``./modules``)."""
    return (settings or get_settings()).modules_root()


def list_candidates(root_dir: Path | str) -> list[Path]:
    """Return the absolute path of every entry directly under *root_dir*.

    Entries are sorted by name so the scan order is stable across platforms.

    Raises:
        DirectoryUnreadableError: *root_dir* is missing, not a directory, or
            cannot be listed by this process.
    """
    root = Path(root_dir).expanduser().absolute()
    try:
        names = os.listdir(root)
    except OSError as exc:
        raise DirectoryUnreadableError(root, exc.strerror or str(exc)) from exc
    return [root / name for name in sorted(names)]
