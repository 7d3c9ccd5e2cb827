"""
Settings for intern-daily.

Three layers, later ones winning key by key: built-in defaults, the user's
~/.intern-daily/config.json, and the repository's .intern-daily/config.json.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

# Per-repository settings directory and the file name used at both levels
PROJECT_DIR = ".intern-daily"
CONFIG_FILENAME = "config.json"

_DEFAULTS: dict[str, Any] = {
    "default_model": "qwen2.5-coder:7b",
    "ollama_host": "http://localhost:11434",
    "ai": {"enabled": True},
    "timezone": "Australia/Sydney",
    "max_commits": 200,
    "output_dir": ".internlog",
    "logging": {"level": "INFO", "file": None},
    "ignore": {"additional_patterns": []},
}


def global_config_path() -> Path:
    return Path.home() / PROJECT_DIR / CONFIG_FILENAME


def project_config_path(repo_root: Path) -> Path:
    return repo_root / PROJECT_DIR / CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    return copy.deepcopy(_DEFAULTS)


def load_json_object(path: Path) -> dict[str, Any] | None:
    """Parsed JSON object at path, or None when the file is absent, unreadable or not an object."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return None
    return data if isinstance(data, dict) else None


def _overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Recursively copy layer onto base (nested dicts merge, anything else replaces)."""
    for key, value in layer.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _overlay(current, value)
        else:
            base[key] = value
    return base


def load_config(repo_root: Path | None = None) -> dict[str, Any]:
    """Defaults, then the global file, then (when repo_root is given) the project file."""
    merged = default_config()
    layers = [global_config_path()]
    if repo_root is not None:
        layers.append(project_config_path(repo_root.resolve()))
    for path in layers:
        data = load_json_object(path)
        if data is not None:
            _overlay(merged, data)
    return merged


def save_config(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def resolve_path(path: Path) -> Path:
    return path.resolve()


def find_repo_root(path: Path) -> Path | None:
    """Nearest directory at or above path holding .intern-daily/ or .git; None at the filesystem root."""
    start = path.resolve()
    if start.is_file():
        start = start.parent
    for candidate in (start, *start.parents):
        if (candidate / PROJECT_DIR).is_dir() or (candidate / ".git").exists():
            return candidate
    return None
