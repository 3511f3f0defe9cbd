"""Hidden-entry and suffix filtering for walked paths."""

from __future__ import annotations

import os
from typing import Sequence

HIDDEN_NAMES = {"node_modules"}


def entry_name(path: str) -> str:
    """Return the name a path is classified by.

    The current and parent directory both map to ``"."`` so that scanning
    ``..`` is not mistaken for a hidden entry.
    """
    name = os.path.basename(os.path.normpath(path))
    return "." if name == ".." else name


def is_hidden(name: str) -> bool:
    """Dotfiles and dependency folders are hidden; ``"."`` never is."""
    if name == ".":
        return False
    name = name.removeprefix("./")
    return name.startswith(".") or name in HIDDEN_NAMES


def is_included(name: str, allow: Sequence[str], deny: Sequence[str]) -> bool:
    """Return True if the name passes the suffix deny-list and allow-list.

    Matching is a raw suffix match: ``"go"`` also matches ``"ergo"``.
    """
    for suffix in deny:
        if name.endswith(suffix):
            return False

    if not allow:
        return True

    return any(name.endswith(suffix) for suffix in allow)
