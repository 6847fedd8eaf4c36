"""Auditum — Runtime configuration.

Configuration is loaded from (in order of increasing priority):
    1. Built-in defaults (this file)
    2. User config:   ~/.auditum/config.yaml
    3. Explicit config file passed to ``Settings.load()``
    4. Environment variables prefixed with AUDITUM_

The modules root is resolved once, at startup, and passed explicitly to the
discovery layer.  ``AUDITUM_MODULES`` overrides it; the default is
``modules`` under the working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from auditum.exceptions import ConfigurationError


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: Literal["json", "console"] = "console"
    file: Path | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AUDITUM_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    modules: Path = Field(
        default=Path("modules"),
        description=(
            "Directory whose immediate children are candidate modules. "
            "Relative paths are anchored at the working directory."
        ),
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def modules_root(self) -> Path:
        """Return the absolute modules root directory."""
        root = self.modules.expanduser()
        if not root.is_absolute():
            root = Path.cwd() / root
        return root.resolve()

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Load settings from YAML files + environment variables."""
        data: dict[str, object] = {}

        candidates = [Path.home() / ".auditum" / "config.yaml"]
        if config_file:
            if not config_file.exists():
                raise ConfigurationError(
                    f"Config file '{config_file}' does not exist",
                    context={"config_file": str(config_file)},
                )
            candidates.append(config_file)

        for path in candidates:
            if not path.exists():
                continue
            try:
                with path.open(encoding="utf-8") as f:
                    loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(
                    f"Config file '{path}' is not valid YAML: {exc}",
                    context={"config_file": str(path)},
                ) from exc
            if not isinstance(loaded, dict):
                raise ConfigurationError(
                    f"Config file '{path}' must contain a mapping",
                    context={"config_file": str(path)},
                )
            data.update(loaded)

        # Environment variables win over file values.
        env_settings = cls()
        for name in env_settings.model_fields_set:
            data.pop(name, None)
        return cls(**data)


# Module-level singleton — replaced by ``Settings.load()`` at host startup.
_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def override_settings(settings: Settings | None) -> None:
    """Replace the module-level singleton. Used in tests and by the CLI."""
    global _settings
    _settings = settings
