"""Module layer — Entry-point prober.

Confirms that the file a manifest points at can be opened by this process,
without importing it.
"""

from __future__ import annotations

import os

from auditum.exceptions import EntryPointUnreadableError
from auditum.modules.manifest import ManifestInfo


def probe_entry_point(manifest: ManifestInfo) -> ManifestInfo:
    """Return *manifest* unchanged if its entry point is a readable file.

    Raises:
        EntryPointUnreadableError: The file is missing, is not a regular file,
            is not readable by the current process, or cannot be inspected
            at all (e.g. an unsearchable parent directory).
    """
    path = manifest.entry_path
    try:
        exists = path.exists()
        is_file = exists and path.is_file()
        readable = is_file and os.access(path, os.R_OK)
    except OSError as exc:
        raise EntryPointUnreadableError(path, exc.strerror or str(exc)) from exc

    if not exists:
        raise EntryPointUnreadableError(path, "file does not exist")
    if not is_file:
        raise EntryPointUnreadableError(path, "not a regular file")
    if not readable:
        raise EntryPointUnreadableError(path, "permission denied")
    return manifest
