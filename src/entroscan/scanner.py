"""Concurrent tree walker behind `entroscan scan`.

Every directory fans out one thread per entry and joins them all before
returning, so a call to ``TreeWalker.scan`` never leaves work behind. Tokens
are scored on the walker threads and offered to one shared ``TopKRegistry``.
"""

from __future__ import annotations

import codecs
import logging
import os
import stat
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import pathspec

from entroscan.config import ScanConfig
from entroscan.entropy import iter_tokens, shannon_entropy
from entroscan.paths import entry_name, is_hidden, is_included
from entroscan.registry import Finding, TopKRegistry

logger = logging.getLogger(__name__)

SNIFF_BYTES = 64 * 1024


@dataclass(frozen=True)
class PathError:
    path: str
    message: str


class ScanStats:
    """Thread-safe file counters and sink for path errors."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.files_scanned = 0
        self.files_skipped = 0
        self.errors: list[PathError] = []

    def record_scanned(self) -> None:
        with self._lock:
            self.files_scanned += 1

    def record_skipped(self) -> None:
        with self._lock:
            self.files_skipped += 1

    def report_error(self, path: str, exc: OSError) -> None:
        """Log a path error and keep it for the final summary."""
        message = exc.strerror or str(exc)
        logger.warning("Error reading file %s: %s", path, message)
        with self._lock:
            self.errors.append(PathError(path=path, message=message))


@dataclass
class ScanResult:
    findings: list[Finding] = field(default_factory=list)
    files_scanned: int = 0
    files_skipped: int = 0
    errors: list[PathError] = field(default_factory=list)


@dataclass(frozen=True)
class IgnoreRules:
    """Gitignore patterns anchored at a scan root."""

    root: str
    spec: pathspec.PathSpec

    def matches(self, path: str, is_dir: bool) -> bool:
        rel = os.path.relpath(path, self.root)
        if rel == ".":
            return False
        rel = rel.replace(os.sep, "/")
        if is_dir:
            rel += "/"
        return self.spec.match_file(rel)


def first_line_is_text(head: bytes, encoding: str, complete: bool = True) -> bool:
    """Return True if the first line of head decodes cleanly.

    ``head`` is the start of a file; ``complete`` says whether it is the
    whole file. Bytes after the first line are not checked, and a first line
    that runs past the end of an incomplete head counts as text so far.
    """
    decoder = codecs.getincrementaldecoder(encoding)()
    try:
        decoder.decode(head, final=complete)
    except UnicodeDecodeError as exc:
        valid = codecs.getincrementaldecoder(encoding)().decode(head[: exc.start])
        return "\n" in valid
    return True


def load_gitignore(root: str) -> IgnoreRules | None:
    """Load .gitignore patterns from a scan root, if it has any."""
    try:
        text = Path(root, ".gitignore").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    lines = [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    if not lines:
        return None
    return IgnoreRules(root=root, spec=pathspec.GitIgnoreSpec.from_lines(lines))


class TreeWalker:
    """Recursively scans paths and feeds findings into a registry."""

    def __init__(
        self,
        config: ScanConfig,
        registry: TopKRegistry,
        stats: ScanStats | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.stats = stats or ScanStats()
        self._slots = (
            threading.BoundedSemaphore(config.max_workers) if config.max_workers else None
        )

    def scan(self, path: str | os.PathLike) -> None:
        """Scan a root path.

        Raises OSError if the root itself cannot be read. Errors below the
        root are reported to ``self.stats`` and never abort the scan.
        """
        root = os.fspath(path)
        ignore = load_gitignore(root) if self.config.respect_gitignore else None
        self._visit(root, ignore, frozenset())

    def _visit(
        self, path: str, ignore: IgnoreRules | None, ancestors: frozenset[str]
    ) -> None:
        info = os.stat(path)
        name = entry_name(path)

        if is_hidden(name) and not self.config.explore_hidden:
            logger.debug("Skipping hidden entry %s", path)
            return

        is_dir = stat.S_ISDIR(info.st_mode)
        if ignore is not None and ignore.matches(path, is_dir):
            logger.debug("Skipping gitignored entry %s", path)
            return

        if is_dir:
            real = os.path.realpath(path)
            if real in ancestors:
                logger.debug("Skipping directory cycle at %s", path)
                return
            self._fan_out(path, ignore, ancestors | {real})
            return

        if not is_included(name, self.config.extensions, self.config.ignored_extensions):
            return

        if not stat.S_ISREG(info.st_mode):
            logger.debug("Skipping special file %s", path)
            self.stats.record_skipped()
            return

        self._scan_file(path)

    def _fan_out(
        self, path: str, ignore: IgnoreRules | None, ancestors: frozenset[str]
    ) -> None:
        failures: list[Exception] = []
        threads: list[threading.Thread] = []

        for name in sorted(os.listdir(path)):
            child = os.path.join(path, name)
            if self._slots is not None and not self._slots.acquire(blocking=False):
                # Pool exhausted: scan on this thread.
                self._visit_child(child, ignore, ancestors, failures)
                continue

            thread = threading.Thread(
                target=self._run_child,
                args=(child, ignore, ancestors, failures),
                daemon=True,
            )
            try:
                thread.start()
            except RuntimeError:
                logger.debug("Thread limit reached, scanning %s inline", child)
                if self._slots is not None:
                    self._slots.release()
                self._visit_child(child, ignore, ancestors, failures)
                continue
            threads.append(thread)

        for thread in threads:
            thread.join()

        if failures:
            raise failures[0]

    def _run_child(
        self,
        child: str,
        ignore: IgnoreRules | None,
        ancestors: frozenset[str],
        failures: list[Exception],
    ) -> None:
        try:
            self._visit_child(child, ignore, ancestors, failures)
        finally:
            if self._slots is not None:
                self._slots.release()

    def _visit_child(
        self,
        child: str,
        ignore: IgnoreRules | None,
        ancestors: frozenset[str],
        failures: list[Exception],
    ) -> None:
        try:
            self._visit(child, ignore, ancestors)
        except OSError as exc:
            self.stats.report_error(child, exc)
        except Exception as exc:
            failures.append(exc)

    def _scan_file(self, path: str) -> None:
        encoding = self.config.encoding
        min_length = self.config.min_characters

        if not self.config.include_binary:
            with open(path, "rb") as handle:
                head = handle.read(SNIFF_BYTES)
            if not first_line_is_text(head, encoding, complete=len(head) < SNIFF_BYTES):
                logger.debug("Skipping binary file %s", path)
                self.stats.record_skipped()
                return

        with open(path, encoding=encoding, errors="replace", newline="\n") as handle:
            for line_number, line in enumerate(handle, 1):
                for token in iter_tokens(line, min_length):
                    self.registry.offer(
                        Finding(
                            score=shannon_entropy(token),
                            path=path,
                            line_number=line_number,
                            token=token,
                        )
                    )

        self.stats.record_scanned()


def scan_paths(
    paths: Iterable[str | os.PathLike],
    config: ScanConfig,
    stats: ScanStats | None = None,
) -> ScanResult:
    """Scan every root into one shared registry and collect the ranking.

    Unreadable roots are reported like any other path error.
    """
    stats = stats or ScanStats()
    registry = TopKRegistry(config.result_count)
    walker = TreeWalker(config, registry, stats)

    for path in paths:
        try:
            walker.scan(path)
        except OSError as exc:
            stats.report_error(os.fspath(path), exc)

    logger.info(
        "Scanned %d files, skipped %d, %d errors",
        stats.files_scanned,
        stats.files_skipped,
        len(stats.errors),
    )
    return ScanResult(
        findings=registry.findings(),
        files_scanned=stats.files_scanned,
        files_skipped=stats.files_skipped,
        errors=list(stats.errors),
    )
