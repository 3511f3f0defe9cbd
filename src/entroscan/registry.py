"""Bounded, thread-safe ranking of the highest-entropy findings."""

from __future__ import annotations

import bisect
import math
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class Finding:
    score: float
    path: str
    line_number: int
    token: str

    @property
    def is_empty(self) -> bool:
        return self.score == -math.inf


EMPTY_FINDING = Finding(score=-math.inf, path="", line_number=0, token="")


def _neg_score(finding: Finding) -> float:
    return -finding.score


class TopKRegistry:
    """Keeps the ``capacity`` highest-scoring findings, best first.

    The slot list always has exactly ``capacity`` entries; unused slots hold
    ``EMPTY_FINDING``. ``offer`` may be called from any number of threads.
    ``snapshot`` is only consistent once every producer has finished.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._slots: list[Finding] = [EMPTY_FINDING] * capacity
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._capacity

    def offer(self, finding: Finding) -> None:
        """Insert finding if it beats the lowest retained score."""
        if self._capacity == 0:
            return

        # Unlocked fast-reject; may read a stale slot. The locked re-check
        # below is authoritative.
        if self._slots[-1].score >= finding.score:
            return

        with self._lock:
            slots = self._slots
            if slots[-1].score >= finding.score:
                return

            # Leftmost slot with a strictly lower score; ties stay ahead.
            index = bisect.bisect_right(slots, -finding.score, key=_neg_score)
            slots[index + 1 :] = slots[index:-1]
            slots[index] = finding

    def snapshot(self) -> list[Finding]:
        """Return a copy of all slots, including empty ones."""
        with self._lock:
            return list(self._slots)

    def findings(self) -> list[Finding]:
        """Return the retained findings without empty slots."""
        return [f for f in self.snapshot() if not f.is_empty]
