"""
YAML configuration for import runs and the command line.

Example ``wiktapi.yaml``::

    db_path: data/wiktionary.db
    data_dir: data/jsonl
    batch_size: 50000
    remove_sources: false
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigError

DEFAULT_DB_PATH = Path("data/wiktionary.db")
DEFAULT_DATA_DIR = Path("data/jsonl")
DEFAULT_BATCH_SIZE = 50_000


@dataclass(frozen=True)
class Settings:
    """Locations and tuning knobs shared by the importer and the CLI."""
    db_path: Path = DEFAULT_DB_PATH
    data_dir: Path = DEFAULT_DATA_DIR
    batch_size: int = DEFAULT_BATCH_SIZE
    remove_sources: bool = False


_PATH_FIELDS = {"db_path", "data_dir"}


def load_settings(
    source: Union[str, Path, Dict[str, Any], None] = None,
) -> Settings:
    """Load settings from a YAML file, a YAML string, or a dictionary.

    Args:
        source: Path to a YAML file, YAML text, a parsed mapping, or
            ``None`` for the defaults

    Returns:
        Settings object

    Raises:
        ConfigError: If the content cannot be parsed or is invalid
        FileNotFoundError: If the file does not exist
    """
    base_dir: Optional[Path] = None

    if source is None:
        return Settings()
    if isinstance(source, dict):
        data = source
    elif isinstance(source, Path) or (isinstance(source, str) and _is_file_path(source)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = _load_yaml(f)
        base_dir = path.parent
    else:
        data = _load_yaml(source)

    return _parse_settings(data, base_dir)


def _is_file_path(s: str) -> bool:
    """Check if a string looks like a file path."""
    if "\n" in s or ": " in s or s.rstrip().endswith(":"):
        return False
    return not s.lstrip().startswith(("{", "-"))


def _load_yaml(stream: Any) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line_num = mark.line + 1 if mark else None
        raise ConfigError(f"Invalid YAML: {e}", line=line_num) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("YAML root must be a mapping (dictionary)")
    return data


def _parse_settings(data: Dict[str, Any], base_dir: Optional[Path]) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key in _PATH_FIELDS & set(data):
        value = data[key]
        if not isinstance(value, str) or not value:
            raise ConfigError(f"Field '{key}' must be a non-empty string")
        path = Path(value).expanduser()
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        values[key] = path

    if "batch_size" in data:
        batch_size = data["batch_size"]
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise ConfigError("Field 'batch_size' must be a positive integer")
        values["batch_size"] = batch_size

    if "remove_sources" in data:
        if not isinstance(data["remove_sources"], bool):
            raise ConfigError("Field 'remove_sources' must be true or false")
        values["remove_sources"] = data["remove_sources"]

    return replace(Settings(), **values)
