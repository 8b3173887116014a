"""Ad Brief CLI — entry-point for all backend operations.

Usage:
    python cli/main.py --help

Commands:
    extract   → admission, fetch, reduction and profile for one URL
    generate  → the full brief (profile + ad concepts)
    serve     → run the HTTP API under uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from adbrief.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging

import typer

from adbrief.config import settings
from adbrief.creative import MockGenerator, get_generator
from adbrief.errors import PipelineError
from adbrief.pipeline import generate_brief, process_url

app = typer.Typer(
    name="adbrief",
    help="Ad Brief backend CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@app.command("extract")
def extract(
    url: str = typer.Argument(..., help="Public http(s) URL to profile."),
) -> None:
    """Fetch a URL and print its extraction record and business profile as JSON."""
    try:
        result = process_url(url)
    except PipelineError as exc:
        typer.echo(f"[extract] {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


@app.command("generate")
def generate(
    url: str = typer.Argument(..., help="Public http(s) URL to build a brief for."),
    mock: bool = typer.Option(False, "--mock", help="Force the deterministic mock generator."),
) -> None:
    """Fetch a URL and print the full creative brief as JSON."""
    generator = MockGenerator() if mock else get_generator()
    try:
        brief = generate_brief(url, generator=generator)
    except PipelineError as exc:
        typer.echo(f"[generate] {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(brief.model_dump(), indent=2, ensure_ascii=False))


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(3001, help="Port to listen on."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    typer.echo(f"[serve] Ad Brief API on http://{host}:{port} (LLM_PROVIDER={settings.llm_provider})")
    uvicorn.run("adbrief.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
