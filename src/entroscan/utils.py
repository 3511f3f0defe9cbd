"""Config file loading, merge and list-parsing helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

import yaml


def load_json(path: Path) -> dict:
    """Load a JSON file, returning empty dict if missing or malformed."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_yaml(path: Path) -> dict:
    """Load a YAML file, returning empty dict if missing or malformed."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def load_mapping(path: Path) -> dict:
    """Load a JSON or YAML mapping depending on the file suffix."""
    if path.suffix.lower() in (".yaml", ".yml"):
        return load_yaml(path)
    return load_json(path)


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def parse_suffixes(values: str | Iterable[str]) -> tuple[str, ...]:
    """Split a comma-separated list (or iterable) into sorted unique suffixes.

    Empty entries are dropped, so ``"go,,py,go"`` gives ``("go", "py")``.
    """
    if isinstance(values, str):
        values = values.split(",")
    return tuple(sorted({v.strip() for v in values if v and v.strip()}))
