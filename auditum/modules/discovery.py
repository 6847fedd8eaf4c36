"""Module layer — Discovery orchestrator.

Runs the manifest reader and the entry-point prober over every candidate of
the modules root.  Candidates are independent filesystem probes, so each one
runs in its own worker thread and the batch is joined with
``asyncio.gather`` before returning: a slow candidate delays the result, it
never gets dropped or outlives the call.

Failure isolation:
  - A candidate that fails (no manifest, bad role, unreadable entry point,
    I/O error) is logged with its path and left out of the result.
  - Only errors outside the per-candidate boundary propagate, e.g. a
    ``DirectoryUnreadableError`` for the root itself.

Discovery never executes module code; see :mod:`auditum.modules.loader`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from auditum.exceptions import AuditumError
from auditum.logging import get_logger
from auditum.modules.manifest import ManifestInfo, read_manifest
from auditum.modules.probe import probe_entry_point
from auditum.modules.scanner import default_modules_root, list_candidates

log = get_logger(__name__)


def inspect_candidate(candidate_dir: Path) -> ManifestInfo:
    """Read the manifest of *candidate_dir* and probe its entry point."""
    return probe_entry_point(read_manifest(candidate_dir))


async def _discover_one(candidate_dir: Path) -> ManifestInfo | None:
    try:
        manifest = await asyncio.to_thread(inspect_candidate, candidate_dir)
    except (AuditumError, OSError) as exc:
        log.warning(
            "module_discovery_failed",
            candidate=str(candidate_dir),
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return None

    log.info(
        "module_discovered",
        module_name=manifest.name,
        role=manifest.role.value,
        candidate=str(candidate_dir),
    )
    return manifest


async def discover_all(root_dir: Path | str | None = None) -> list[ManifestInfo]:
    """Return the validated manifests found under *root_dir*, in scan order.

    *root_dir* defaults to the configured modules root.

    Raises:
        DirectoryUnreadableError: *root_dir* itself cannot be listed.
    """
    root = Path(root_dir) if root_dir is not None else default_modules_root()
    candidates = list_candidates(root)
    log.debug("module_discovery_started", root=str(root), candidates=len(candidates))

    results = await asyncio.gather(*(_discover_one(c) for c in candidates))
    manifests = [m for m in results if m is not None]

    log.info(
        "module_discovery_finished",
        root=str(root),
        discovered=len(manifests),
        skipped=len(candidates) - len(manifests),
    )
    return manifests


def discover_all_sync(root_dir: Path | str | None = None) -> list[ManifestInfo]:
    """Blocking wrapper around :func:`discover_all` for hosts without a loop."""
    return asyncio.run(discover_all(root_dir))
