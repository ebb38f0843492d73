"""CLI entry point for the AG-UI bridge."""

import json
from typing import Optional

import typer
from rich.console import Console

from .. import __version__

app = typer.Typer(
    name="agui-bridge",
    help="AG-UI bridge - serve an agent runtime over the AG-UI protocol",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"agui-bridge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """AG-UI bridge."""


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Hostname to bind (default from config: 127.0.0.1)",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on (default from config: 4097)",
    ),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        help="Gateway bearer token (overrides config and AGUI_BRIDGE_GATEWAY_TOKEN)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARN or ERROR",
    ),
    print_logs: bool = typer.Option(
        False,
        "--print-logs",
        help="Mirror logs to stderr",
    ),
):
    """Serve the AG-UI endpoint in front of the echo runtime."""
    from .cmd.serve import serve_command

    serve_command(
        host=host,
        port=port,
        token=token,
        log_level=log_level,
        print_logs=print_logs,
    )


@app.command()
def config(
    path: bool = typer.Option(
        False,
        "--path",
        help="Show configuration directory",
    ),
):
    """Print the resolved configuration as JSON."""
    from ..core.config import ConfigManager
    from ..core.global_paths import GlobalPath

    if path:
        console.print(GlobalPath.config())
        return

    resolved = ConfigManager.get()
    data = resolved.model_dump(by_alias=True, exclude_none=True, mode="json")
    if data.get("gateway", {}).get("auth", {}).get("token"):
        data["gateway"]["auth"]["token"] = "***"
    console.print_json(json.dumps(data))
    for source in ConfigManager.sources():
        console.print(f"[dim]source: {source}[/dim]")


if __name__ == "__main__":
    app()
