"""gsc-indexer CLI — audit a site's indexing status and request indexing.

Usage:
    python cli/main.py example.com
    python cli/main.py https://example.com/ --path ./service_account.json

The single positional argument is a domain or a URL-prefix property.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from indexer.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from dataclasses import replace
from typing import Optional

import typer

from cli.rendering import render_no_sitemaps, render_status_summary, render_tally
from indexer.config import settings
from indexer.engine.runner import RunReport, run_site
from indexer.errors import (
    AuthError,
    CacheCorruptError,
    NoSitemapsError,
    RemoteAccessError,
    TransportError,
)

app = typer.Typer(
    name="gsc-indexer",
    help="Check the indexing status of a site's sitemap URLs and request indexing for the rest.",
    add_completion=False,
)


def _echo_summary(report: RunReport) -> None:
    typer.echo(render_status_summary(report))


@app.command()
def index(
    site: Optional[str] = typer.Argument(None, help="Domain or site URL (e.g. example.com)."),
    path: Optional[Path] = typer.Option(None, "--path", help="Service account JSON key file."),
    client_email: Optional[str] = typer.Option(None, "--client-email", help="Service account email."),
    private_key: Optional[str] = typer.Option(None, "--private-key", help="Service account private key."),
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size", min=1, help="Concurrent status lookups per batch."
    ),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Status cache directory."),
    prune: bool = typer.Option(
        False, "--prune/--no-prune", help="Forget cached URLs that left the sitemaps."
    ),
) -> None:
    """Audit SITE and submit indexing requests for its unindexed pages."""
    if not site:
        typer.echo("❌ Please provide a domain or site URL as the first argument.", err=True)
        raise typer.Exit(1)

    overrides = {
        key: value
        for key, value in {
            "service_account_path": path,
            "client_email": client_email,
            "private_key": private_key,
            "batch_size": batch_size,
            "cache_dir": cache_dir,
        }.items()
        if value is not None
    }
    cfg = replace(settings, **overrides)

    try:
        report = asyncio.run(
            run_site(site, cfg=cfg, prune=prune, on_audit_complete=_echo_summary)
        )
    except NoSitemapsError as exc:
        typer.echo(render_no_sitemaps(exc), err=True)
        raise typer.Exit(1)
    except AuthError as exc:
        typer.echo(f"🔑 Authentication failed: {exc}", err=True)
        raise typer.Exit(1)
    except CacheCorruptError as exc:
        typer.echo(f"🗃️  {exc}", err=True)
        typer.echo("   Fix or remove the file manually; it was left untouched.", err=True)
        raise typer.Exit(1)
    except RemoteAccessError as exc:
        typer.echo(f"❌ {exc}", err=True)
        for line in exc.hint.splitlines():
            typer.echo(f"   {line}", err=True)
        raise typer.Exit(1)
    except TransportError as exc:
        typer.echo(f"🌐 Giving up after repeated network failures: {exc}", err=True)
        typer.echo("   No status cache was written for this run.", err=True)
        raise typer.Exit(1)

    typer.echo(render_tally(report.tally))
    typer.echo("👍 All done!")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
