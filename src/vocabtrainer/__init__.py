"""vocabtrainer package."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

__all__ = ["__version__"]


def _source_tree_version() -> str | None:
    """Read ``[project].version`` when running from a source checkout."""
    for base in Path(__file__).resolve().parents:
        pyproject = base / "pyproject.toml"
        if not pyproject.is_file():
            continue
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError:
            return None
        project = data.get("project", {})
        if project.get("name") != "vocabtrainer":
            continue
        found = project.get("version")
        return str(found) if found else None
    return None


_local_version = _source_tree_version()
if _local_version is not None:
    __version__ = _local_version
else:
    try:
        __version__ = version("vocabtrainer")
    except PackageNotFoundError:
        __version__ = "0+unknown"
