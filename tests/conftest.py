"""Shared pytest fixtures for the auditum test suite."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
import structlog

from auditum.config import Settings, override_settings

# ---------------------------------------------------------------------------
# Module sources
# ---------------------------------------------------------------------------

# init() appends to a file beside the module so tests can count calls across
# separate loads (each load executes the module body afresh).
IO_MODULE_SOURCE = '''
from pathlib import Path

_CALLS = Path(__file__).with_name("init_calls.txt")


def init():
    with _CALLS.open("a", encoding="utf-8") as f:
        f.write("init\\n")


def on_request(request):
    return {"request": request}


def on_response(response):
    return {"response": response}
'''

SCRAPER_MODULE_SOURCE = '''
def init():
    pass


def search(query):
    return [query]
'''

FAILING_INIT_SOURCE = '''
def init():
    raise RuntimeError("database unreachable")


def on_request(request):
    return request


def on_response(response):
    return response
'''

INCOMPLETE_IO_SOURCE = '''
def init():
    pass


def on_request(request):
    return request
'''


def init_call_count(module_dir: Path) -> int:
    calls = module_dir / "init_calls.txt"
    if not calls.exists():
        return 0
    return len(calls.read_text(encoding="utf-8").splitlines())


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep the user's config and environment out of every test."""
    monkeypatch.delenv("AUDITUM_MODULES", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    override_settings(None)
    yield
    override_settings(None)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Undo ``configure_logging`` calls made by CLI tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def test_settings(modules_root: Path) -> Settings:
    settings = Settings(modules=modules_root, logging={"level": "debug", "format": "console"})
    override_settings(settings)
    return settings


# ---------------------------------------------------------------------------
# Module trees
# ---------------------------------------------------------------------------


@pytest.fixture
def modules_root(tmp_path: Path) -> Path:
    root = tmp_path / "modules"
    root.mkdir()
    return root


MakeModule = Callable[..., Path]


@pytest.fixture
def make_module(modules_root: Path) -> MakeModule:
    """Create a candidate directory under ``modules_root``.

    ``manifest`` overrides the generated ``module.json`` document entirely;
    pass ``manifest=None`` with ``write_manifest=False`` for a bare directory.
    """

    def _make(
        dirname: str,
        *,
        role: str = "io",
        name: str | None = None,
        main: str = "module.py",
        source: str | None = IO_MODULE_SOURCE,
        manifest: dict[str, Any] | None = None,
        write_manifest: bool = True,
    ) -> Path:
        module_dir = modules_root / dirname
        module_dir.mkdir()
        if write_manifest:
            document = manifest if manifest is not None else {
                "main": main,
                "auditum": {"type": role, "name": name or dirname},
            }
            (module_dir / "module.json").write_text(json.dumps(document), encoding="utf-8")
        if source is not None:
            (module_dir / main).write_text(source, encoding="utf-8")
        return module_dir

    return _make
