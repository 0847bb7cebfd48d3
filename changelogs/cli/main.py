"""Main CLI application using Cyclopts."""

import sys

import cyclopts
import logfire
import uvicorn
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax

from changelogs.config import Config

app = cyclopts.App(
    name="changelogs",
    help="Changelogs server - CLI",
)

REDACTED = "***"

# Dotted paths of settings that must never be printed
SECRET_FIELDS = (
    ("auth", "oidc", "client_secret"),
    ("auth", "session", "secret"),
)


def _load_config(console: Console) -> Config:
    try:
        return Config()  # type: ignore[call-arg]
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        sys.exit(1)


def redact(settings: dict) -> dict:
    """Replace secret values in a dumped Config with a placeholder."""
    for path in SECRET_FIELDS:
        section = settings
        for key in path[:-1]:
            section = section.get(key, {})
        if section.get(path[-1]):
            section[path[-1]] = REDACTED
    return settings


@app.command
def serve(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = False,
) -> None:
    """Run the changelogs server.

    Args:
        host: Host to bind to.
        port: Port to listen on.
        reload: Restart on code changes (development only).
    """
    console = Console(stderr=True)
    config = _load_config(console)
    if not config.auth.session.secret:
        console.print("[red]CHANGELOGS_AUTH__SESSION__SECRET must be set[/red]")
        sys.exit(1)

    # Traces are only exported when LOGFIRE_TOKEN is present
    logfire.configure(
        service_name="changelogs",
        service_version=config.server.version,
        send_to_logfire="if-token-present",
        console=False,
    )

    console.print(f"Serving {config.server.name} on http://{host}:{port}")
    uvicorn.run(
        "changelogs.application.api.rest.app:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,  # Keep the logging set up by configure_logging
    )


@app.command
def config() -> None:
    """Print the resolved configuration with secrets redacted."""
    console = Console()
    settings = redact(_load_config(console).model_dump(mode="json"))
    console.print(Syntax(yaml.safe_dump(settings, sort_keys=False), "yaml"))


if __name__ == "__main__":
    app()
