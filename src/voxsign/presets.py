"""Preset catalog loading with bundled data and external override support.

Presets are named sign requests stored in YAML files called
``presets.yaml``:

- Bundled data shipped with the package
- User config directory (~/.config/voxsign/)
- Environment variable override for custom data directories
- Explicit path override in API calls

Environment Variables:
    VOXSIGN_PRESET_DATA: ``os.pathsep`` separated paths to directories
                         containing a ``presets.yaml``. These take
                         priority over the user and bundled catalogs.

Example:
    export VOXSIGN_PRESET_DATA="/path/to/my/presets:/another/path"
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

__all__ = [
    "VOXSIGN_PRESET_DATA",
    "PRESET_FILENAME",
    "load_presets",
    "list_presets",
    "get_preset",
    "clear_cache",
]

logger = logging.getLogger(__name__)

# Environment variable name for custom data paths
VOXSIGN_PRESET_DATA = "VOXSIGN_PRESET_DATA"
PRESET_FILENAME = "presets.yaml"

_BUNDLED_DATA_DIR = Path(__file__).parent / "data"


def clear_cache() -> None:
    """Clear cached catalog data.

    Call this after editing catalog files or changing the environment.
    """
    _get_data_dirs.cache_clear()
    _load_presets_cached.cache_clear()


@lru_cache(maxsize=None)
def _get_data_dirs() -> tuple:
    """Return data directories in priority order (highest first).

    Search order:
        1. Directories from VOXSIGN_PRESET_DATA
        2. User config directory (~/.config/voxsign/)
        3. Bundled data directory
    """
    dirs: List[Path] = []

    env_path = os.environ.get(VOXSIGN_PRESET_DATA)
    if env_path:
        for p in env_path.split(os.pathsep):
            p = p.strip()
            if p:
                path = Path(p).expanduser().resolve()
                if path.is_dir():
                    dirs.append(path)
                else:
                    logger.warning("%s entry is not a directory: %s", VOXSIGN_PRESET_DATA, p)

    user_config = Path.home() / ".config" / "voxsign"
    if user_config.is_dir():
        dirs.append(user_config)

    if _BUNDLED_DATA_DIR.is_dir():
        dirs.append(_BUNDLED_DATA_DIR)

    return tuple(dirs)


def _load_yaml(path: Path) -> Dict[str, Dict[str, Any]]:
    """Load and validate a preset catalog file; returns ``{name: entry}``."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Invalid preset catalog in {path}: expected dict at root")

    schema_version = str(data.get("schema_version", "1.0"))
    if not schema_version.startswith("1."):
        raise ValueError(
            f"Unsupported schema version '{schema_version}' in {path}. "
            f"Expected version 1.x"
        )

    presets = data.get("presets")
    if not isinstance(presets, dict):
        raise ValueError(f"Preset catalog {path} missing required 'presets' section")

    entries: Dict[str, Dict[str, Any]] = {}
    for name, entry in presets.items():
        if not isinstance(entry, dict) or not isinstance(entry.get("request"), dict):
            raise ValueError(f"Preset '{name}' in {path} needs a 'request' mapping")
        entries[str(name)] = {
            "description": entry.get("description", ""),
            "request": dict(entry["request"]),
            "_source_path": str(path),
        }
    return entries


@lru_cache(maxsize=8)
def _load_presets_cached(custom_path_str: Optional[str]) -> Dict[str, Dict[str, Any]]:
    if custom_path_str:
        custom_path = Path(custom_path_str)
        if not custom_path.exists():
            raise FileNotFoundError(f"Custom preset catalog not found: {custom_path}")
        return _load_yaml(custom_path)

    merged: Dict[str, Dict[str, Any]] = {}
    # Lowest priority first so that earlier directories win.
    for data_dir in reversed(_get_data_dirs()):
        path = data_dir / PRESET_FILENAME
        if path.exists():
            merged.update(_load_yaml(path))
            logger.debug("loaded presets from %s", path)
    return merged


def load_presets(custom_path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """Load the preset catalog.

    Args:
        custom_path: Optional explicit YAML file; disables the directory search.

    Returns:
        Mapping of preset name to ``{"description", "request", "_source_path"}``.

    Raises:
        FileNotFoundError: If ``custom_path`` does not exist.
        ValueError: If a catalog file is malformed.
    """
    custom_str = str(custom_path) if custom_path else None
    return _load_presets_cached(custom_str)


def list_presets(custom_path: Optional[Path] = None) -> List[str]:
    return sorted(load_presets(custom_path))


def get_preset(name: str, custom_path: Optional[Path] = None) -> Dict[str, Any]:
    """Return a copy of the request mapping stored under ``name``.

    Raises:
        KeyError: If no preset of that name exists.
    """
    presets = load_presets(custom_path)
    if name not in presets:
        raise KeyError(f"Unknown preset '{name}'. Available: {sorted(presets)}")
    return dict(presets[name]["request"])
