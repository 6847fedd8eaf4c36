"""Module layer — discovery, contract validation and loading of extension modules."""

from auditum.modules.discovery import discover_all, discover_all_sync
from auditum.modules.loader import ModuleHandle, load_module
from auditum.modules.manifest import ManifestInfo, read_manifest
from auditum.modules.probe import probe_entry_point
from auditum.modules.registry import ModuleRegistry
from auditum.modules.scanner import default_modules_root, list_candidates
from auditum.modules.schema import ModuleRole, required_capabilities
from auditum.modules.validator import validate_structure

__all__ = [
    "ManifestInfo",
    "ModuleHandle",
    "ModuleRegistry",
    "ModuleRole",
    "default_modules_root",
    "discover_all",
    "discover_all_sync",
    "list_candidates",
    "load_module",
    "probe_entry_point",
    "read_manifest",
    "required_capabilities",
    "validate_structure",
]
