"""Module layer — Loader.

Turns a discovered :class:`ManifestInfo` into a ready :class:`ModuleHandle`:

    load code → build capability table → validate structure → init() once

Every failure along that sequence is reported as a single
:class:`~auditum.exceptions.ModuleLoadError` whose ``reason`` already holds
the original message, so hosts can log it without walking ``__cause__``.

Each call executes the entry point afresh under a private module name and
calls ``init`` again.  There is no caching and no retry: initialisation code
may have side effects that are unsafe to repeat blindly, so repeating a load
is always the host's explicit decision.
"""

from __future__ import annotations

import importlib.util
import re
import sys
import uuid
from dataclasses import dataclass
from importlib.machinery import SourceFileLoader
from types import ModuleType

from auditum.exceptions import (
    AuditumError,
    InitializationError,
    ModuleLoadError,
    StructureInvalidError,
)
from auditum.logging import get_logger, module_context
from auditum.modules.manifest import ManifestInfo
from auditum.modules.schema import INIT_CAPABILITY
from auditum.modules.validator import (
    CapabilityTable,
    missing_capabilities,
    surface_from_module,
)

log = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"\W")


@dataclass(frozen=True)
class ModuleHandle:
    """A loaded, validated and initialised module, owned by the host."""

    manifest: ManifestInfo
    surface: CapabilityTable

    @property
    def name(self) -> str:
        return self.manifest.name

    def capability(self, name: str) -> object:
        """Return the callable registered under *name*.

        Raises:
            KeyError: The module exposes no such capability.
        """
        return self.surface[name]


def _private_module_name(manifest: ManifestInfo) -> str:
    slug = _UNSAFE_CHARS.sub("_", manifest.name)
    return f"auditum_module_{slug}_{uuid.uuid4().hex[:8]}"


def _load_code(manifest: ManifestInfo) -> ModuleType:
    """Execute the entry-point file and return the resulting module object.

    The module sits in ``sys.modules`` only while its body runs (decorators
    such as ``dataclass`` look it up there) and is removed afterwards.
    """
    module_name = _private_module_name(manifest)
    path = str(manifest.entry_path)
    loader = SourceFileLoader(module_name, path)
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None:
        raise ImportError(f"cannot create an import spec for '{path}'")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)
    return module


def _initialise(manifest: ManifestInfo, surface: CapabilityTable) -> None:
    try:
        surface[INIT_CAPABILITY]()
    except (Exception, SystemExit) as exc:
        raise InitializationError(manifest.name, exc) from exc
    log.debug("module_initialized", module_name=manifest.name, role=manifest.role.value)


def _failure_reason(exc: BaseException) -> str:
    if isinstance(exc, AuditumError):
        return exc.message
    return f"{type(exc).__name__}: {exc}"


def load_module(manifest: ManifestInfo) -> ModuleHandle:
    """Load, validate and initialise the module described by *manifest*.

    Raises:
        ModuleLoadError: The code could not be executed, does not satisfy its
            role contract (``cause`` is a ``StructureInvalidError``), or its
            ``init`` raised (``cause`` is an ``InitializationError``).
    """
    with module_context(manifest.name):
        try:
            module = _load_code(manifest)
            surface = surface_from_module(module)

            missing = missing_capabilities(manifest.role, surface)
            if missing:
                raise StructureInvalidError(manifest.name, manifest.role.value, missing)

            _initialise(manifest, surface)
        # SystemExit from module code must not end the host process.
        except (Exception, SystemExit) as exc:
            reason = _failure_reason(exc)
            log.error(
                "module_load_failed",
                module_name=manifest.name,
                entry_path=str(manifest.entry_path),
                error_type=type(exc).__name__,
                reason=reason,
            )
            raise ModuleLoadError(manifest.name, reason, cause=exc) from exc

        log.info(
            "module_loaded",
            module_name=manifest.name,
            role=manifest.role.value,
            exposed=len(surface),
        )
        return ModuleHandle(manifest=manifest, surface=surface)
