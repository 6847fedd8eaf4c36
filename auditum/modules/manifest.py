"""Module layer — Manifest reader.

Every candidate directory must carry a ``module.json`` file at its root::

    {
      "main": "module.py",
      "auditum": {
        "type": "io",
        "name": "stdout-writer"
      }
    }

``main`` is the entry-point path, relative to the candidate directory.  The
nested ``auditum`` block declares the module role (``type``) and identity
(``name``).  Any other key of that block is kept verbatim in
:attr:`ManifestInfo.extra` so newer manifests still load on older runtimes.

Reading a manifest never executes module code and never touches the entry
point; see :mod:`auditum.modules.probe` for that.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from auditum.exceptions import (
    InvalidRoleError,
    ManifestIncompleteError,
    ManifestMissingError,
    UnknownRoleError,
)
from auditum.modules.schema import ModuleRole, parse_role

MANIFEST_FILENAME = "module.json"
ENTRY_POINT_KEY = "main"
DESCRIPTOR_KEY = "auditum"
ROLE_KEY = "type"
NAME_KEY = "name"


@dataclass(frozen=True)
class ManifestInfo:
    """Validated identity of one module directory."""

    name: str
    role: ModuleRole
    entry_path: Path
    module_dir: Path
    # Excluded from hashing: mappingproxy is unhashable.
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "role": self.role.value,
            "entry_path": str(self.entry_path),
            "module_dir": str(self.module_dir),
            "extra": dict(self.extra),
        }


def _load_document(module_dir: Path) -> dict[str, Any]:
    manifest_path = module_dir / MANIFEST_FILENAME
    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestMissingError(module_dir, f"{MANIFEST_FILENAME}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise ManifestMissingError(module_dir, f"{MANIFEST_FILENAME} is not UTF-8") from exc

    try:
        document = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise ManifestMissingError(module_dir, f"{MANIFEST_FILENAME} is not valid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise ManifestMissingError(module_dir, f"{MANIFEST_FILENAME} is not a JSON object")
    return document


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _required_str(container: Mapping[str, Any], key: str, module_dir: Path, label: str) -> str:
    value = container.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ManifestIncompleteError(module_dir, label)
    return value


def read_manifest(candidate_dir: Path | str) -> ManifestInfo:
    """Read and validate the manifest of *candidate_dir*.

    Raises:
        ManifestMissingError:    No readable JSON-object ``module.json``.
        ManifestIncompleteError: The ``auditum`` block, its ``type`` or
                                 ``name``, or the top-level ``main`` is absent.
        InvalidRoleError:        ``auditum.type`` is not a recognized role
                                 (including non-string values).
    """
    module_dir = Path(os.path.abspath(candidate_dir))
    document = _load_document(module_dir)

    descriptor = document.get(DESCRIPTOR_KEY)
    if not isinstance(descriptor, dict):
        raise ManifestIncompleteError(module_dir, DESCRIPTOR_KEY)

    # Non-string roles fall through to InvalidRoleError.
    role_value = descriptor.get(ROLE_KEY)
    if _is_blank(role_value):
        raise ManifestIncompleteError(module_dir, f"{DESCRIPTOR_KEY}.{ROLE_KEY}")
    name = _required_str(descriptor, NAME_KEY, module_dir, f"{DESCRIPTOR_KEY}.{NAME_KEY}")

    try:
        role = parse_role(role_value)
    except UnknownRoleError:
        raise InvalidRoleError(module_dir, role_value) from None

    main = _required_str(document, ENTRY_POINT_KEY, module_dir, ENTRY_POINT_KEY)
    # normpath rather than resolve(): symlinked module trees keep their layout.
    entry_path = Path(os.path.normpath(module_dir / main))

    extra = {k: v for k, v in descriptor.items() if k not in (ROLE_KEY, NAME_KEY)}
    return ManifestInfo(
        name=name,
        role=role,
        entry_path=entry_path,
        module_dir=module_dir,
        extra=MappingProxyType(extra),
    )
