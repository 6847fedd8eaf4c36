"""Module layer — Module registry.

The registry is the host-side record of which modules are live.  It handles:
  - Storing initialised :class:`ModuleHandle` objects by module name
  - Remembering why a module failed to load, for status reporting
  - A discover-then-load-all sequence with an explicit failure policy

The loader itself never decides whether one failure should stop a startup
sequence.  ``load_all`` makes that choice visible: by default failed modules
are recorded and skipped; with ``fail_fast=True`` the first
``ModuleLoadError`` propagates to the caller.
"""

from __future__ import annotations

from pathlib import Path

from auditum.exceptions import ModuleLoadError, ModuleNotFoundError
from auditum.logging import get_logger
from auditum.modules.discovery import discover_all
from auditum.modules.loader import ModuleHandle, load_module
from auditum.modules.manifest import ManifestInfo
from auditum.modules.schema import ModuleRole, parse_role

log = get_logger(__name__)


class ModuleRegistry:
    """Runtime registry of loaded Auditum modules.

    Usage::

        registry = ModuleRegistry()
        await registry.discover_and_load(Path("/srv/auditum/modules"))

        writer = registry.get("stdout-writer")
        writer.capability("on_request")(request)
    """

    def __init__(self) -> None:
        self._handles: dict[str, ModuleHandle] = {}
        # Modules whose load raised ModuleLoadError, name → reason.
        self._failed: dict[str, str] = {}

    def register(self, handle: ModuleHandle) -> None:
        """Record an initialised module, replacing any handle with its name."""
        name = handle.name
        if name in self._handles:
            log.warning("module_already_registered", module_name=name)
        self._handles[name] = handle
        self._failed.pop(name, None)

    def load(self, manifest: ManifestInfo) -> ModuleHandle:
        """Load *manifest* and register the result.

        Raises:
            ModuleLoadError: Propagated from :func:`load_module`; the reason
                is also kept for :meth:`list_failed`.
        """
        try:
            handle = load_module(manifest)
        except ModuleLoadError as exc:
            self._failed[manifest.name] = exc.reason
            raise
        self.register(handle)
        return handle

    def load_all(
        self,
        manifests: list[ManifestInfo],
        *,
        fail_fast: bool = False,
    ) -> list[ModuleHandle]:
        """Load every manifest in order and return the handles that loaded."""
        handles: list[ModuleHandle] = []
        for manifest in manifests:
            try:
                handles.append(self.load(manifest))
            except ModuleLoadError as exc:
                if fail_fast:
                    raise
                log.warning("module_skipped", module_name=manifest.name, reason=exc.reason)
        return handles

    async def discover_and_load(
        self,
        root_dir: Path | str | None = None,
        *,
        fail_fast: bool = False,
    ) -> list[ModuleHandle]:
        """Discover modules under *root_dir* and load all of them."""
        manifests = await discover_all(root_dir)
        return self.load_all(manifests, fail_fast=fail_fast)

    def get(self, name: str) -> ModuleHandle:
        """Return the handle registered under *name*.

        Raises:
            ModuleNotFoundError: No module with this name is loaded.
        """
        try:
            return self._handles[name]
        except KeyError:
            raise ModuleNotFoundError(module_name=name) from None

    def is_available(self, name: str) -> bool:
        return name in self._handles

    def by_role(self, role: ModuleRole | str) -> list[ModuleHandle]:
        """Return the loaded modules declaring *role*, sorted by name."""
        wanted = parse_role(role)
        return [
            self._handles[name]
            for name in sorted(self._handles)
            if self._handles[name].manifest.role is wanted
        ]

    def list_available(self) -> list[str]:
        return sorted(self._handles)

    def list_failed(self) -> dict[str, str]:
        """Return module name → reason for modules that failed to load."""
        return dict(self._failed)

    def status_report(self) -> dict[str, list[str] | dict[str, str]]:
        """Return a structured status report.

        Schema::

            {
                "available": ["stdout-writer"],
                "failed": {"web-search": "init raised RuntimeError: no network"}
            }
        """
        return {
            "available": self.list_available(),
            "failed": self.list_failed(),
        }
