"""Layered TOML configuration for Chronicle.

Layers are read from one config directory, lowest precedence first:
``default.toml`` then ``{CHRONICLE_ENV}.toml``. Either may be absent;
anything not set in a layer falls back to the model defaults.
"""

import os
import tomllib
from functools import reduce
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "CHRONICLE_CONFIG_DIR"
ENVIRONMENT_ENV = "CHRONICLE_ENV"
DEFAULT_ENVIRONMENT = "development"
BASE_LAYER = "default.toml"
MAX_SEARCH_DEPTH = 5


def find_config_dir(start: Path | None = None) -> Path | None:
    """Nearest ``config/`` directory at or above ``start`` (default: cwd)."""
    start = start or Path.cwd()
    for directory in [start, *start.parents][:MAX_SEARCH_DEPTH]:
        candidate = directory / "config"
        if candidate.is_dir():
            return candidate
    return None


def get_config_dir() -> Path:
    """Directory holding the TOML layers.

    Raises:
        FileNotFoundError: If CHRONICLE_CONFIG_DIR names a missing directory.
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} points to a missing directory: {path}")
        return path
    return find_config_dir() or Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV) or DEFAULT_ENVIRONMENT


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; tables merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path | None = None, env: str | None = None) -> list[Path]:
    """Existing layer files, lowest precedence first."""
    config_dir = config_dir or get_config_dir()
    env = env or get_environment()
    names = [BASE_LAYER] if env == Path(BASE_LAYER).stem else [BASE_LAYER, f"{env}.toml"]
    return [path for path in (config_dir / name for name in names) if path.is_file()]


def load_config(config_dir: Path | None = None, env: str | None = None) -> dict[str, Any]:
    """Merged contents of every layer; ``{}`` when there are none."""
    layers = config_layers(config_dir, env)
    return reduce(deep_merge, (load_toml(path) for path in layers), {})
