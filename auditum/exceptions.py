"""Auditum — Exception hierarchy.

All exceptions raised by the runtime inherit from AuditumError so that hosts
can catch the full family with a single except clause when needed.

Hierarchy:
    AuditumError
    ├── ConfigurationError
    └── ModuleError
        ├── UnknownRoleError
        │   └── InvalidRoleError
        ├── DirectoryUnreadableError
        ├── ManifestError
        │   ├── ManifestMissingError
        │   └── ManifestIncompleteError
        ├── EntryPointUnreadableError
        ├── StructureInvalidError
        ├── InitializationError
        ├── ModuleLoadError
        └── ModuleNotFoundError
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class AuditumError(Exception):
    """Base exception for all Auditum errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"


class ConfigurationError(AuditumError):
    """Settings could not be loaded or are inconsistent."""


# ---------------------------------------------------------------------------
# Module layer
# ---------------------------------------------------------------------------


class ModuleError(AuditumError):
    """Base for all module discovery and loading errors."""


class UnknownRoleError(ModuleError):
    """The value is not one of the recognized module roles."""

    def __init__(self, role: object) -> None:
        super().__init__(
            f"Unknown module role: {role!r}",
            context={"role": str(role)},
        )
        self.role = role


class InvalidRoleError(UnknownRoleError):
    """A manifest declares a role that is not recognized."""

    def __init__(self, module_dir: Path | str, role: object) -> None:
        ModuleError.__init__(
            self,
            f"Invalid module type {role!r} declared in '{module_dir}'",
            context={"module_dir": str(module_dir), "role": str(role)},
        )
        self.role = role
        self.module_dir = str(module_dir)


class DirectoryUnreadableError(ModuleError):
    """The modules root directory could not be listed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(
            f"Cannot list modules directory '{path}': {reason}",
            context={"path": str(path), "reason": reason},
        )
        self.path = str(path)
        self.reason = reason


class ManifestError(ModuleError):
    """Base for manifest reading errors."""


class ManifestMissingError(ManifestError):
    """The candidate has no readable, JSON-object manifest file."""

    def __init__(self, module_dir: Path | str, reason: str) -> None:
        super().__init__(
            f"No readable manifest in '{module_dir}': {reason}",
            context={"module_dir": str(module_dir), "reason": reason},
        )
        self.module_dir = str(module_dir)
        self.reason = reason


class ManifestIncompleteError(ManifestError):
    """A required manifest entry is absent or empty."""

    def __init__(self, module_dir: Path | str, field: str) -> None:
        super().__init__(
            f'No "{field}" entry found in manifest of \'{module_dir}\'',
            context={"module_dir": str(module_dir), "field": field},
        )
        self.module_dir = str(module_dir)
        self.field = field


class EntryPointUnreadableError(ModuleError):
    """The declared entry-point file is missing or not readable."""

    def __init__(self, entry_path: Path | str, reason: str) -> None:
        super().__init__(
            f"Entry point '{entry_path}' is not readable: {reason}",
            context={"entry_path": str(entry_path), "reason": reason},
        )
        self.entry_path = str(entry_path)
        self.reason = reason


class StructureInvalidError(ModuleError):
    """The loaded code does not expose every capability its role requires."""

    def __init__(self, module_name: str, role: str, missing: list[str]) -> None:
        super().__init__(
            f"'{role}' contract not satisfied; "
            f"missing or not callable: {', '.join(missing)}",
            context={"module_name": module_name, "role": role, "missing": missing},
        )
        self.module_name = module_name
        self.role = role
        self.missing = missing


class InitializationError(ModuleError):
    """The module's ``init`` capability raised."""

    def __init__(self, module_name: str, cause: BaseException) -> None:
        super().__init__(
            f"init raised {type(cause).__name__}: {cause}",
            context={"module_name": module_name, "cause": str(cause)},
        )
        self.module_name = module_name
        self.cause = cause


class ModuleLoadError(ModuleError):
    """A module could not be brought to the initialized state.

    ``reason`` is the message of the original failure so callers can log it
    without walking the cause chain; ``cause`` keeps the original exception.
    """

    def __init__(
        self,
        module_name: str,
        reason: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"Module '{module_name}' failed to load: {reason}",
            context={"module_name": module_name, "reason": reason},
        )
        self.module_name = module_name
        self.reason = reason
        self.cause = cause


class ModuleNotFoundError(ModuleError):
    """No loaded module with the given name is registered."""

    def __init__(self, module_name: str) -> None:
        super().__init__(
            f"Module '{module_name}' is not registered",
            context={"module_name": module_name},
        )
        self.module_name = module_name
