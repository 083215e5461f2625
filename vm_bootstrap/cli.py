from __future__ import annotations

import logging
import os
from datetime import date
from typing import Optional

import typer
import uvicorn

from .api import make_app
from .client import BootstrapClient
from .composer import ScriptComposer
from .models import Identity
from .repository import ScriptRepository
from .resolver import CascadeResolver, build_candidates
from .settings import BootstrapSettings

app = typer.Typer(help="VM bootstrap script service")


def _default_base_url() -> str:
    return os.getenv("BOOTSTRAP_URL", "http://127.0.0.1:8080").rstrip("/")


def _parse_date(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter("expected format YYYY-MM-DD") from e


def _identity_params(app_name, hostname, platform, platform_version) -> dict[str, Optional[str]]:
    return {
        "app": app_name,
        "hostname": hostname,
        "platform": platform,
        "platform_version": platform_version,
    }


# -------------------------
# SERVER
# -------------------------
@app.command("serve")
def serve(
    host: str = typer.Option(None, "--host"),
    port: int = typer.Option(None, "--port"),
    config: str = typer.Option(None, "--config", help="YAML settings file (default: $BOOTSTRAP_CONFIG)"),
):
    """
    Serve bootstrap scripts over HTTP.
    """
    try:
        settings = BootstrapSettings.from_env(config_file=config)
        host = host or settings.host
        port = port or settings.port

        logging.basicConfig(level=logging.DEBUG if settings.log_level == "trace" else settings.log_level.upper())
        api_app = make_app(settings)

        typer.echo(f"Serving {settings.scripts_root} on http://{host}:{port}")
        uvicorn.run(api_app, host=host, port=port, log_level=settings.log_level)

    except Exception as e:
        typer.echo(f"ERROR starting bootstrap service: {type(e).__name__}: {e}")
        raise


# -------------------------
# AUTHORING
# -------------------------
@app.command("candidates")
def candidates(
    app_name: str = typer.Option(None, "--app"),
    hostname: str = typer.Option(None, "--hostname"),
    platform: str = typer.Option(None, "--platform"),
    platform_version: str = typer.Option(None, "--platform-version"),
    on: str = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
):
    """Print the candidate paths in the order they are tried."""
    identity = Identity.from_params(_identity_params(app_name, hostname, platform, platform_version))
    paths = build_candidates(identity, _parse_date(on))
    if not paths:
        typer.echo("(no candidates: empty identity gets the preloader)")
        return
    for path in paths:
        typer.echo(path)


@app.command("render")
def render(
    app_name: str = typer.Option(None, "--app"),
    hostname: str = typer.Option(None, "--hostname"),
    platform: str = typer.Option(None, "--platform"),
    platform_version: str = typer.Option(None, "--platform-version"),
    on: str = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    scripts_root: str = typer.Option(None, "--scripts-root"),
    config: str = typer.Option(None, "--config"),
):
    """Print the script the service would return, without starting it."""
    settings = BootstrapSettings.from_env(config_file=config)
    repository = ScriptRepository(scripts_root or settings.scripts_root)
    composer = ScriptComposer(CascadeResolver(repository))
    composition = composer.compose(
        _identity_params(app_name, hostname, platform, platform_version),
        _parse_date(on),
    )
    typer.echo(composition.body.decode("utf-8", errors="replace"), nl=False)
    typer.echo(f"[{composition.kind}]", err=True)


# -------------------------
# CLIENT
# -------------------------
@app.command("fetch")
def fetch(
    app_name: str = typer.Option(None, "--app"),
    hostname: str = typer.Option(None, "--hostname"),
    platform: str = typer.Option(None, "--platform"),
    platform_version: str = typer.Option(None, "--platform-version"),
    url: str = typer.Option(None, "--url", help="Service URL (default: $BOOTSTRAP_URL)"),
):
    """Ask a running service for the script of an identity."""
    client = BootstrapClient(url or _default_base_url())
    script = client.fetch_script(**_identity_params(app_name, hostname, platform, platform_version))
    typer.echo(script, nl=False)


if __name__ == "__main__":
    app()
