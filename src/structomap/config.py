"""Projector defaults: YAML config + env var overrides.

Priority: env var > YAML file > default.
Env var: STRUCTOMAP_KEY_CASE=snake (or camel, pascal, none).
YAML file: path argument, else $STRUCTOMAP_CONFIG, else ~/.structomap/config.yaml

    key_case: snake

The process-wide config is read once, lazily, by the first Projector built
without an explicit config. set_default_case() changes it for projectors
built afterwards; existing projectors keep their casing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from structomap.casing import KeyCase
from structomap.observability import get_logger

_ENV_PREFIX = "STRUCTOMAP_"
_DEFAULT_PATH = Path("~/.structomap/config.yaml").expanduser()


def _config_path(path: Path | None) -> Path:
    if path is not None:
        return path
    env_path = os.environ.get(f"{_ENV_PREFIX}CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return _DEFAULT_PATH


def _parse_case(raw: Any, source: str) -> KeyCase | None:
    try:
        return KeyCase.parse(raw)
    except ValueError:
        get_logger(__name__).warning(
            "config.invalid_value", option="key_case", value=raw, source=source
        )
        return None


@dataclass
class ProjectorConfig:
    """Defaults applied to newly constructed projectors."""

    key_case: KeyCase = KeyCase.NOT_SET

    @classmethod
    def load(cls, path: Path | None = None) -> ProjectorConfig:
        """Load config from YAML file, then override with env vars."""
        file_path = _config_path(path)
        file_values: dict[str, Any] = {}

        if file_path.exists():
            raw = yaml.safe_load(file_path.read_text()) or {}
            if isinstance(raw, dict):
                file_values = raw

        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            name = f.name
            env_key = f"{_ENV_PREFIX}{name.upper()}"

            if env_key in os.environ:
                value = _parse_case(os.environ[env_key], env_key)
            elif name in file_values:
                value = _parse_case(file_values[name], str(file_path))
            else:
                continue
            if value is not None:
                kwargs[name] = value

        return cls(**kwargs)

    def to_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name).value for f in fields(self)}


# Singleton
_config: ProjectorConfig | None = None


def get_config(path: Path | None = None) -> ProjectorConfig:
    """Get the process-wide ProjectorConfig, loading it on first use."""
    global _config
    if _config is None:
        _config = ProjectorConfig.load(path)
    return _config


def set_default_case(case: KeyCase | str) -> None:
    """Set the key casing for every projector constructed from now on."""
    get_config().key_case = KeyCase.parse(case)


def reset_config() -> None:
    """Reset for testing."""
    global _config
    _config = None
