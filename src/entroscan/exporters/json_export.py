"""JSON export for scan results."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from entroscan import __version__
from entroscan.scanner import ScanResult


def scan_to_json(result: ScanResult, discrete: bool = False) -> dict:
    """Convert a scan result to a structured JSON dict."""
    return {
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "summary": {
            "files_scanned": result.files_scanned,
            "files_skipped": result.files_skipped,
            "errors": len(result.errors),
            "findings": len(result.findings),
        },
        "findings": [
            {
                "score": round(f.score, 6),
                "path": f.path,
                "line": f.line_number,
                "token": None if discrete else f.token,
            }
            for f in result.findings
        ],
        "errors": [{"path": e.path, "message": e.message} for e in result.errors],
    }


def scan_to_json_string(result: ScanResult, discrete: bool = False) -> str:
    """Return formatted JSON string."""
    return json.dumps(scan_to_json(result, discrete), indent=2)
