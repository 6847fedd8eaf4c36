"""Unit tests — Manifest reader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from auditum.exceptions import (
    InvalidRoleError,
    ManifestIncompleteError,
    ManifestMissingError,
    UnknownRoleError,
)
from auditum.modules.manifest import ManifestInfo, read_manifest
from auditum.modules.schema import ModuleRole


def _write(module_dir: Path, document: Any) -> Path:
    module_dir.mkdir(parents=True, exist_ok=True)
    text = document if isinstance(document, str) else json.dumps(document)
    (module_dir / "module.json").write_text(text, encoding="utf-8")
    return module_dir


def _valid() -> dict[str, Any]:
    return {"main": "module.py", "auditum": {"type": "io", "name": "stdout-writer"}}


# ---------------------------------------------------------------------------
# Success path
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestReadManifest:
    def test_reads_valid_manifest(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "writer", _valid())

        info = read_manifest(module_dir)

        assert info.name == "stdout-writer"
        assert info.role is ModuleRole.IO
        assert info.entry_path == module_dir / "module.py"
        assert info.module_dir == module_dir

    def test_does_not_require_entry_point_to_exist(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "writer", _valid())
        info = read_manifest(module_dir)
        assert not info.entry_path.exists()

    def test_entry_path_relative_to_candidate_not_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        module_dir = _write(tmp_path / "a" / "b" / "mod1", {**_valid(), "main": "index.py"})
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        info = read_manifest(module_dir)

        assert info.entry_path == tmp_path / "a" / "b" / "mod1" / "index.py"

    def test_relative_candidate_is_made_absolute(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write(tmp_path / "mod1", _valid())
        monkeypatch.chdir(tmp_path)

        info = read_manifest("mod1")

        assert info.module_dir == tmp_path / "mod1"
        assert info.entry_path == tmp_path / "mod1" / "module.py"

    def test_nested_entry_point(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {**_valid(), "main": "./src/../lib/main.py"})
        assert read_manifest(module_dir).entry_path == module_dir / "lib" / "main.py"

    def test_extra_descriptor_fields_preserved(self, tmp_path: Path) -> None:
        document = _valid()
        document["auditum"].update({"version": "1.2.0", "options": {"buffered": True}})
        module_dir = _write(tmp_path / "mod", document)

        info = read_manifest(module_dir)

        assert dict(info.extra) == {"version": "1.2.0", "options": {"buffered": True}}

    def test_manifest_info_is_immutable(self, tmp_path: Path) -> None:
        info = read_manifest(_write(tmp_path / "mod", _valid()))
        with pytest.raises(AttributeError):
            info.name = "other"  # type: ignore[misc]
        with pytest.raises(TypeError):
            info.extra["x"] = 1  # type: ignore[index]

    def test_manifest_info_is_hashable(self, tmp_path: Path) -> None:
        document = _valid()
        document["auditum"]["options"] = {"buffered": True}
        first = read_manifest(_write(tmp_path / "mod", document))
        second = read_manifest(tmp_path / "mod")

        assert first == second
        assert len({first, second}) == 1

    def test_to_dict(self, tmp_path: Path) -> None:
        info = read_manifest(_write(tmp_path / "mod", _valid()))
        data = info.to_dict()
        assert data["name"] == "stdout-writer"
        assert data["role"] == "io"
        assert data["entry_path"] == str(tmp_path / "mod" / "module.py")
        assert isinstance(info, ManifestInfo)


# ---------------------------------------------------------------------------
# Missing / unparsable manifests
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestManifestMissing:
    def test_no_manifest_file(self, tmp_path: Path) -> None:
        module_dir = tmp_path / "empty"
        module_dir.mkdir()
        with pytest.raises(ManifestMissingError):
            read_manifest(module_dir)

    def test_candidate_is_a_file(self, tmp_path: Path) -> None:
        f = tmp_path / "README.md"
        f.write_text("# hi")
        with pytest.raises(ManifestMissingError):
            read_manifest(f)

    def test_invalid_json(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", "{not json")
        with pytest.raises(ManifestMissingError, match="not valid JSON"):
            read_manifest(module_dir)

    def test_non_object_document(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", [1, 2, 3])
        with pytest.raises(ManifestMissingError, match="not a JSON object"):
            read_manifest(module_dir)

    def test_too_deeply_nested_json(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", "[" * 200_000 + "]" * 200_000)
        with pytest.raises(ManifestMissingError, match="not valid JSON"):
            read_manifest(module_dir)


# ---------------------------------------------------------------------------
# Incomplete manifests
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestManifestIncomplete:
    def test_missing_main_then_fixed(self, tmp_path: Path) -> None:
        document = _valid()
        del document["main"]
        module_dir = _write(tmp_path / "mod", document)

        with pytest.raises(ManifestIncompleteError) as exc_info:
            read_manifest(module_dir)
        assert exc_info.value.field == "main"

        _write(module_dir, _valid())
        assert read_manifest(module_dir).name == "stdout-writer"

    def test_main_inside_descriptor_does_not_count(self, tmp_path: Path) -> None:
        document = {"auditum": {"type": "io", "name": "x", "main": "module.py"}}
        module_dir = _write(tmp_path / "mod", document)
        with pytest.raises(ManifestIncompleteError) as exc_info:
            read_manifest(module_dir)
        assert exc_info.value.field == "main"

    def test_missing_descriptor_block(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "module.py"})
        with pytest.raises(ManifestIncompleteError) as exc_info:
            read_manifest(module_dir)
        assert exc_info.value.field == "auditum"

    def test_descriptor_not_an_object(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "module.py", "auditum": "io"})
        with pytest.raises(ManifestIncompleteError) as exc_info:
            read_manifest(module_dir)
        assert exc_info.value.field == "auditum"

    def test_missing_type(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "m.py", "auditum": {"name": "x"}})
        with pytest.raises(ManifestIncompleteError) as exc_info:
            read_manifest(module_dir)
        assert exc_info.value.field == "auditum.type"

    def test_missing_name(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "m.py", "auditum": {"type": "io"}})
        with pytest.raises(ManifestIncompleteError) as exc_info:
            read_manifest(module_dir)
        assert exc_info.value.field == "auditum.name"

    def test_empty_name(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "m.py", "auditum": {"type": "io", "name": " "}})
        with pytest.raises(ManifestIncompleteError):
            read_manifest(module_dir)

    def test_error_message_names_field(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "m.py", "auditum": {"type": "io"}})
        with pytest.raises(ManifestIncompleteError, match='"auditum.name"'):
            read_manifest(module_dir)


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestManifestRole:
    def test_unsupported_role(self, tmp_path: Path) -> None:
        document = {"main": "m.py", "auditum": {"type": "unsupported-role", "name": "x"}}
        module_dir = _write(tmp_path / "mod", document)

        with pytest.raises(InvalidRoleError) as exc_info:
            read_manifest(module_dir)

        assert exc_info.value.role == "unsupported-role"
        assert isinstance(exc_info.value, UnknownRoleError)

    def test_non_string_role_is_invalid(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "m.py", "auditum": {"type": 5, "name": "x"}})

        with pytest.raises(InvalidRoleError) as exc_info:
            read_manifest(module_dir)

        assert exc_info.value.role == 5

    def test_blank_role_is_missing(self, tmp_path: Path) -> None:
        module_dir = _write(tmp_path / "mod", {"main": "m.py", "auditum": {"type": " ", "name": "x"}})
        with pytest.raises(ManifestIncompleteError) as exc_info:
            read_manifest(module_dir)
        assert exc_info.value.field == "auditum.type"

    def test_role_checked_before_main(self, tmp_path: Path) -> None:
        document = {"auditum": {"type": "unsupported-role", "name": "x"}}
        module_dir = _write(tmp_path / "mod", document)
        with pytest.raises(InvalidRoleError):
            read_manifest(module_dir)

    def test_scraper_role(self, tmp_path: Path) -> None:
        document = {"main": "m.py", "auditum": {"type": "scraper", "name": "web-search"}}
        assert read_manifest(_write(tmp_path / "mod", document)).role is ModuleRole.SCRAPER
