"""Terminal rendering of ranked findings."""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.text import Text

from entroscan.registry import Finding


def format_finding(finding: Finding, discrete: bool = False) -> Text:
    """Render one finding as ``<score>: <path>:<line> <token>``.

    The location is styled red; rich drops the style when stdout is not a
    terminal. In discrete mode the token is left blank.
    """
    token = "" if discrete else finding.token
    return Text.assemble(
        f"{finding.score:.3f}: ",
        (f"{finding.path}:{finding.line_number}", "red"),
        f" {token}",
    )


def print_findings(
    findings: Iterable[Finding], console: Console, discrete: bool = False
) -> int:
    """Print findings best first, stopping at the first empty slot.

    Returns the number of lines printed.
    """
    printed = 0
    for finding in findings:
        if finding.is_empty:
            break
        console.print(format_finding(finding, discrete), soft_wrap=True, highlight=False)
        printed += 1
    return printed
