"""Auditum — Module runtime.

Auditum finds extension modules on disk, checks that each one declares a
known role and exposes the callables that role requires, and initialises the
ones that pass so a host application can use them.

Layers (bottom to top):
    1. Schema     — module roles and their required capabilities
    2. Discovery  — directory scan, manifest reading, entry-point probing
    3. Loading    — code execution, structural validation, one-shot init
    4. Host       — module registry, configuration, logging, CLI
"""

__version__ = "0.1.0"
__author__ = "Auditum Contributors"
__license__ = "GPL-3.0-or-later"

from auditum.modules import ManifestInfo, ModuleHandle, discover_all, load_module

__all__ = [
    "__version__",
    "ManifestInfo",
    "ModuleHandle",
    "discover_all",
    "load_module",
]
