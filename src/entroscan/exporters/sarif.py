"""SARIF 2.1.0 output, GitHub Code Scanning compatible."""

from __future__ import annotations

from pathlib import PurePath

from entroscan import __version__
from entroscan.scanner import ScanResult

SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json"

RULE_ID = "high-entropy-token"

_RULE = {
    "id": RULE_ID,
    "name": "HighEntropyToken",
    "shortDescription": {"text": "High-entropy token (possible secret)"},
    "defaultConfiguration": {"level": "warning"},
}


def _uri(path: str) -> str:
    uri = PurePath(path).as_posix()
    return uri[2:] if uri.startswith("./") else uri


def scan_to_sarif(result: ScanResult, discrete: bool = False) -> dict:
    """Convert a scan result to SARIF 2.1.0 format.

    One result per finding; the entropy score is kept in the result
    properties so consumers can re-rank.
    """
    results: list[dict] = []
    for f in result.findings:
        text = f"Token with entropy {f.score:.3f} bits per character"
        if not discrete:
            text += f": {f.token}"
        results.append({
            "ruleId": RULE_ID,
            "level": "warning",
            "message": {"text": text},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": _uri(f.path)},
                        "region": {"startLine": f.line_number},
                    }
                }
            ],
            "properties": {"entropy": round(f.score, 6)},
        })

    return {
        "$schema": SARIF_SCHEMA,
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "entroscan",
                        "version": __version__,
                        "rules": [_RULE],
                    }
                },
                "results": results,
            }
        ],
    }
