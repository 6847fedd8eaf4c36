"""Module layer — Descriptor schema.

Defines the recognized module roles and, per role, the ordered set of
capabilities (top-level callables) a module's entry point must expose.

Every role requires ``init``, the one-shot initialisation capability called by
the loader.  The scraper contract once also listed ``accept``; that entry is
superseded and no longer required.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from auditum.exceptions import UnknownRoleError

INIT_CAPABILITY = "init"


class ModuleRole(str, Enum):
    IO = "io"
    SCRAPER = "scraper"


ROLE_CONTRACTS: Mapping[ModuleRole, tuple[str, ...]] = MappingProxyType(
    {
        ModuleRole.IO: (INIT_CAPABILITY, "on_request", "on_response"),
        ModuleRole.SCRAPER: (INIT_CAPABILITY, "search"),
    }
)


def known_roles() -> list[str]:
    return [role.value for role in ModuleRole]


def is_known_role(value: object) -> bool:
    return isinstance(value, ModuleRole) or value in known_roles()


def parse_role(value: object) -> ModuleRole:
    """Return the :class:`ModuleRole` for *value*.

    Raises:
        UnknownRoleError: *value* is not a recognized role.
    """
    if isinstance(value, ModuleRole):
        return value
    if not isinstance(value, str):
        raise UnknownRoleError(value)
    try:
        return ModuleRole(value)
    except ValueError:
        raise UnknownRoleError(value) from None


def required_capabilities(role: ModuleRole | str) -> tuple[str, ...]:
    """Return the capability names *role* requires, in contract order."""
    return ROLE_CONTRACTS[parse_role(role)]
