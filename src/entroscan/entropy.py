"""Shannon entropy scoring of tokens."""

from __future__ import annotations

import math
from typing import Iterator


def shannon_entropy(data: str) -> float:
    """Calculate Shannon entropy (bits per character) of a string.

    Frequencies are taken over code points, so ``"é"`` counts once.
    """
    if not data:
        return 0.0
    freq: dict[str, int] = {}
    for ch in data:
        freq[ch] = freq.get(ch, 0) + 1
    length = len(data)
    entropy = 0.0
    for count in freq.values():
        p = count / length
        if p == 0:
            continue
        entropy -= p * math.log2(p)
    return entropy


def iter_tokens(line: str, min_length: int) -> Iterator[str]:
    """Yield whitespace-delimited tokens of at least min_length characters."""
    for token in line.strip().split():
        if len(token) >= min_length:
            yield token
