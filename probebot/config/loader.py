"""TOML configuration loader.

Settings come from ``default.toml`` with an optional per-environment file
deep merged on top. Environment variables are applied later by
pydantic-settings.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "PROBEBOT_CONFIG_DIR"
ENVIRONMENT_ENV = "PROBEBOT_ENV"


def get_config_dir() -> Path:
    """Return the directory holding the TOML files.

    PROBEBOT_CONFIG_DIR wins when set and must exist. Otherwise the nearest
    ``config/`` in the working directory or one of its ancestors is used.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        if (directory / "config").is_dir():
            return directory / "config"
    return Path("config")


def get_environment() -> str:
    """Get the current environment from PROBEBOT_ENV (default 'development')."""
    return os.environ.get(ENVIRONMENT_ENV) or "development"


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    return tomllib.loads(file_path.read_text(encoding="utf-8"))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` laid over it; tables merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        below = merged.get(key)
        merged[key] = (
            deep_merge(below, value)
            if isinstance(below, dict) and isinstance(value, dict)
            else value
        )
    return merged


def load_config(
    config_dir: Path | None = None,
    environment: str | None = None,
) -> dict[str, Any]:
    """Load ``default.toml`` and overlay ``{environment}.toml`` if present.

    Raises:
        FileNotFoundError: If ``default.toml`` is missing
    """
    config_dir = config_dir or get_config_dir()
    default_path = config_dir / "default.toml"
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/default.toml or set {CONFIG_DIR_ENV}."
        )

    config = load_toml(default_path)
    overlay = config_dir / f"{environment or get_environment()}.toml"
    if overlay.is_file():
        config = deep_merge(config, load_toml(overlay))
    return config
