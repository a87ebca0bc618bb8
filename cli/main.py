"""urltext CLI: run the extraction pipeline from a terminal.

Usage:
    urltext --help

Commands:
    extract   fetch a URL and print the JSON envelope
    detect    print the detected format of a local file
    parse     print the text extracted from a local file
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from urltext.api.envelope import render
from urltext.logging import setup_logger
from urltext.pipeline import ContentFetcher, ExtractionPipeline, ParseError, TextExtractionEngine

app = typer.Typer(
    name="urltext",
    help="Fetch URLs and extract their plain text.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline progress to stderr."),
) -> None:
    if verbose:
        setup_logger("DEBUG", stream=sys.stderr)


@app.command("extract")
def extract_cmd(
    url: str = typer.Argument(..., help="URL to fetch."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds."),
) -> None:
    """Fetch URL, extract its text and print the JSON envelope."""
    engine = TextExtractionEngine()
    with ContentFetcher(timeout_seconds=timeout) as fetcher:
        outcome = ExtractionPipeline(fetcher, engine).run(json.dumps({"url": url}))

    status, body = render(outcome)
    typer.echo(body)
    if status != 200:
        raise typer.Exit(code=1)


@app.command("detect")
def detect_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to inspect."),
) -> None:
    """Print the media type detected from the file's bytes."""
    engine = TextExtractionEngine()
    fmt = engine.detect(path.read_bytes())
    info = asdict(fmt)
    info["supported"] = engine.supports(fmt)
    typer.echo(json.dumps(info))


@app.command("parse")
def parse_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to extract."),
) -> None:
    """Print the plain text extracted from a local file."""
    try:
        text = TextExtractionEngine().parse(path.read_bytes())
    except ParseError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(text)


if __name__ == "__main__":
    app()
