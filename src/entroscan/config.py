"""Scan configuration: defaults, file loading, validation."""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from pathlib import Path

from entroscan.utils import deep_merge, load_mapping, parse_suffixes

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".entroscan.yaml", ".entroscan.yml", ".entroscan.json")

DEFAULT_IGNORED_EXTENSIONS: tuple[str, ...] = parse_suffixes(
    ".pdf,.png,.jpg,.jpeg,.zip,.mp4,.gif,.ttf,.doc,.docx,.xls,.xlsx,"
    ".ppt,.pptx,.mp3,.wav,.avi,.mov,.ogg,.wasm,.pyc"
)

DEFAULT_CONFIG: dict = {
    "min_characters": 8,
    "result_count": 10,
    "explore_hidden": False,
    "include_binary": False,
    "extensions": [],
    "ignored_extensions": [],
    "use_default_ignores": True,
    "encoding": "utf-8",
    "max_workers": None,
    "respect_gitignore": False,
}

_BOOL_KEYS = ("explore_hidden", "include_binary", "use_default_ignores", "respect_gitignore")
_LIST_KEYS = ("extensions", "ignored_extensions")


@dataclass(frozen=True)
class ScanConfig:
    """Immutable settings shared by every walker thread of one scan."""

    min_characters: int = 8
    result_count: int = 10
    explore_hidden: bool = False
    include_binary: bool = False
    extensions: tuple[str, ...] = ()
    ignored_extensions: tuple[str, ...] = DEFAULT_IGNORED_EXTENSIONS
    encoding: str = "utf-8"
    max_workers: int | None = None
    respect_gitignore: bool = False

    @classmethod
    def from_dict(cls, config: dict) -> ScanConfig:
        """Build a ScanConfig from a (validated) config dict."""
        merged = deep_merge(DEFAULT_CONFIG, config)
        ignored = list(merged["ignored_extensions"])
        if merged["use_default_ignores"]:
            ignored.extend(DEFAULT_IGNORED_EXTENSIONS)
        return cls(
            min_characters=merged["min_characters"],
            result_count=merged["result_count"],
            explore_hidden=merged["explore_hidden"],
            include_binary=merged["include_binary"],
            extensions=parse_suffixes(merged["extensions"]),
            ignored_extensions=parse_suffixes(ignored),
            encoding=merged["encoding"],
            max_workers=merged["max_workers"],
            respect_gitignore=merged["respect_gitignore"],
        )


def get_config_path(start_dir: Path | None = None) -> Path | None:
    """Find an .entroscan config file by walking up from start_dir."""
    search = (start_dir or Path.cwd()).resolve()
    for d in [search, *search.parents]:
        for name in CONFIG_FILENAMES:
            candidate = d / name
            if candidate.is_file():
                return candidate
    return None


def load_config(path: Path | None = None, start_dir: Path | None = None) -> dict:
    """Load a config file merged over the defaults.

    Without an explicit path the nearest .entroscan file is used, if any.
    """
    config_path = path or get_config_path(start_dir)
    if config_path is None:
        return DEFAULT_CONFIG.copy()
    if not config_path.exists():
        logger.warning("Config file not found: %s. Using defaults.", config_path)
        return DEFAULT_CONFIG.copy()
    user_config = load_mapping(config_path)
    if not user_config:
        logger.warning(
            "Config file exists but could not be loaded (corrupt?): %s "
            "Using defaults.", config_path
        )
    return deep_merge(DEFAULT_CONFIG, user_config)


def validate_config(config: dict) -> list[str]:
    """Validate config, returning list of error messages (empty if valid)."""
    errors = []
    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    for key in unknown:
        errors.append(f"Unknown key '{key}'")

    min_chars = config.get("min_characters", 8)
    if not _is_int(min_chars) or min_chars < 1:
        errors.append(f"'min_characters' must be a positive integer, got {min_chars!r}")

    count = config.get("result_count", 10)
    if not _is_int(count) or count < 0:
        errors.append(f"'result_count' must be a non-negative integer, got {count!r}")

    workers = config.get("max_workers")
    if workers is not None and (not _is_int(workers) or workers < 1):
        errors.append(f"'max_workers' must be a positive integer or null, got {workers!r}")

    for key in _BOOL_KEYS:
        if key in config and not isinstance(config[key], bool):
            errors.append(f"'{key}' must be true or false")

    for key in _LIST_KEYS:
        value = config.get(key, [])
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            errors.append(f"'{key}' must be a list of strings")

    encoding = config.get("encoding", "utf-8")
    try:
        codec = codecs.lookup(encoding)
    except (LookupError, TypeError):
        errors.append(f"Unknown encoding '{encoding}'")
    else:
        # bytes-to-bytes and str-to-str codecs such as hex or rot13
        if not getattr(codec, "_is_text_encoding", True):
            errors.append(f"'{encoding}' is not a text encoding")
    return errors


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
