"""
Project name/version lookup for log records.

Installed distributions answer through importlib.metadata; a source checkout
falls back to the nearest pyproject.toml.
"""
import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

DISTRIBUTION_NAME = "inventory-api"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None


def get_pyproject_value(key: str, start: Path | None = None, max_up: int = 5, default: Any = None) -> Any:
    """
    Value for a dot-separated `key` (e.g. "project.version") from the nearest pyproject.toml,
    or `default` when the file or key is missing or unreadable.
    """
    pyproject = find_pyproject(start or Path(__file__).resolve().parent, max_up=max_up)
    if pyproject is None:
        return default

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    cur: Any = data
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def get_project_name(default: str = DISTRIBUTION_NAME) -> str:
    return get_pyproject_value("project.name", default=default)


def get_project_version(default: str = "unknown") -> str:
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        return get_pyproject_value("project.version", default=default)
