"""Module layer — Structural validator.

Loaded code is never inspected directly.  The loader first flattens it into a
:data:`CapabilityTable` (name → object) and the checks below only ever look at
that mapping, so any source of capabilities (a Python module, a test double,
a registered factory) can be validated the same way.
"""

from __future__ import annotations

from types import MappingProxyType, ModuleType
from typing import Any, Mapping

from auditum.modules.schema import ModuleRole, required_capabilities

CapabilityTable = Mapping[str, Any]


def surface_from_module(module: ModuleType) -> CapabilityTable:
    """Build the capability table exposed by a loaded Python module.

    Honours ``__all__`` when the module defines it; otherwise every public
    top-level name is exposed.
    """
    namespace = vars(module)
    exported = namespace.get("__all__")
    if exported is not None:
        names = [str(n) for n in exported if n in namespace]
    else:
        names = [n for n in namespace if not n.startswith("_")]
    return MappingProxyType({name: namespace[name] for name in names})


def missing_capabilities(role: ModuleRole | str, surface: CapabilityTable) -> list[str]:
    """Return the required capabilities absent from *surface* or not callable.

    Names are reported in contract order.  Raises ``UnknownRoleError`` for an
    unrecognized *role*.
    """
    return [
        name
        for name in required_capabilities(role)
        if not callable(surface.get(name))
    ]


def validate_structure(role: ModuleRole | str, surface: CapabilityTable) -> bool:
    """Return True if *surface* satisfies the contract of *role*."""
    return not missing_capabilities(role, surface)
