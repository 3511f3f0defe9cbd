"""Typer CLI: scan and score commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from entroscan import __version__

app = typer.Typer(
    name="entroscan",
    help="Find the highest entropy strings in files. The higher the entropy, "
    "the more random the string is, which is useful for finding secrets.",
    no_args_is_help=True,
)
console = Console()

OUTPUT_FORMATS = ("text", "json", "sarif")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"entroscan v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """entroscan - high-entropy string finder."""


@app.command()
def scan(
    paths: Optional[List[str]] = typer.Argument(
        None, help="Files and folders to scan (default: current folder)."
    ),
    min_characters: Optional[int] = typer.Option(
        None, "--min", help="Minimum token length to compute entropy for. [default: 8]"
    ),
    top: Optional[int] = typer.Option(
        None, "--top", help="Number of results to display. [default: 10]"
    ),
    include_hidden: Optional[bool] = typer.Option(
        None,
        "--include-hidden/--exclude-hidden",
        help="Search in hidden files and folders (.git, .env...). Slows down the search.",
    ),
    ext: Optional[str] = typer.Option(
        None, "--ext", help="Search only files with these suffixes, e.g. --ext go,py,js."
    ),
    ignore_ext: Optional[str] = typer.Option(
        None,
        "--ignore-ext",
        help="Ignore files with these suffixes, e.g. --ignore-ext min.css,_test.go. "
        "Added to the default ignored extensions.",
    ),
    no_default_ignores: bool = typer.Option(
        False, "--ignore-ext-no-defaults", help="Remove the default ignored extensions."
    ),
    binary: Optional[bool] = typer.Option(
        None,
        "--binary/--no-binary",
        help="Include binary files (first line is not valid text).",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", help="Cap on concurrent walker threads (default: unbounded)."
    ),
    gitignore: Optional[bool] = typer.Option(
        None, "--gitignore/--no-gitignore", help="Skip paths matched by the root .gitignore."
    ),
    encoding: Optional[str] = typer.Option(
        None, "--encoding", help="Text encoding of scanned files. [default: utf-8]"
    ),
    discrete: bool = typer.Option(
        False, "--discrete", help="Only show the entropy and location, not the token."
    ),
    output_format: str = typer.Option("text", "--format", "-f", help="text, json or sarif"),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write json/sarif output to a file."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="Config file (default: nearest .entroscan.yaml/.json)."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose logging"),
) -> None:
    """Scan files and folders for high-entropy tokens."""
    from entroscan.config import ScanConfig, load_config, validate_config
    from entroscan.report import print_findings
    from entroscan.scanner import scan_paths
    from entroscan.utils import parse_suffixes

    _setup_logging(verbose)

    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"must be one of {', '.join(OUTPUT_FORMATS)}", param_hint="--format"
        )

    config = load_config(config_file)
    overrides = {
        "min_characters": min_characters,
        "result_count": top,
        "explore_hidden": include_hidden,
        "include_binary": binary,
        "max_workers": workers,
        "respect_gitignore": gitignore,
        "encoding": encoding,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    if ext is not None:
        config["extensions"] = list(parse_suffixes(ext))
    if ignore_ext is not None:
        config["ignored_extensions"] = list(parse_suffixes(ignore_ext))
    if no_default_ignores:
        config["use_default_ignores"] = False

    errors = validate_config(config)
    if errors:
        for e in errors:
            typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(2)

    scan_config = ScanConfig.from_dict(config)

    if not paths:
        typer.echo("No files provided, defaults to current folder.", err=True)
        paths = ["."]

    result = scan_paths(paths, scan_config)

    if output_format == "text":
        print_findings(result.findings, console, discrete=discrete)
        return

    if output_format == "sarif":
        import json

        from entroscan.exporters.sarif import scan_to_sarif

        output = json.dumps(scan_to_sarif(result, discrete), indent=2)
    else:
        from entroscan.exporters.json_export import scan_to_json_string

        output = scan_to_json_string(result, discrete)

    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(output + "\n", encoding="utf-8")
        typer.echo(f"Results saved to: {output_file}", err=True)
    else:
        typer.echo(output)


@app.command()
def score(
    tokens: List[str] = typer.Argument(..., help="Strings to score."),
) -> None:
    """Print the Shannon entropy of each given string."""
    from entroscan.entropy import shannon_entropy

    for token in tokens:
        console.print(
            f"{shannon_entropy(token):.3f}: {token}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
