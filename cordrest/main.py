"""Main entry point for the cordrest command-line tool.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from cordrest.core.command_handler import CommandHandler
from cordrest.core.dispatcher import RequestDispatcher
from cordrest.domain.models.credential import TokenType
from cordrest.infrastructure.cli.display import ConsoleDisplay
from cordrest.infrastructure.codec.json_codec import JsonBodyCodec
from cordrest.infrastructure.config.settings import (
    get_api_base,
    get_config,
    get_connection_timeout,
    get_retry_count,
    get_token,
    get_token_type,
    load_configuration,
)
from cordrest.infrastructure.monitoring.logger_setup import setup_logging
from cordrest.infrastructure.transport.https_transport import HttpsTransport

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    load_configuration()
    setup_logging()

    dependencies: Dict[str, Any] = {}
    dependencies['ui'] = ConsoleDisplay()
    dependencies['transport'] = HttpsTransport(verify_tls=bool(get_config('api.verify_tls', True)))
    dependencies['codec'] = JsonBodyCodec()
    dependencies['dispatcher'] = RequestDispatcher(
        transport=dependencies['transport'],
        codec=dependencies['codec'],
        api_base=get_api_base(),
    )
    dependencies['command_handler'] = CommandHandler(
        dispatcher=dependencies['dispatcher'],
        ui=dependencies['ui'],
        token=get_token(),
        token_type=get_token_type(),
        connection_timeout=get_connection_timeout(),
        retry_count=get_retry_count(),
    )
    logger.info(f"Dependencies initialized. API base: {dependencies['dispatcher'].api_base}")
    return dependencies


_dependencies: Optional[Dict[str, Any]] = None


def get_dependencies() -> Dict[str, Any]:
    global _dependencies
    if _dependencies is None:
        _dependencies = create_dependencies()
    return _dependencies


def reset_dependencies() -> None:
    global _dependencies
    _dependencies = None


# --- Typer App Definition ---
app = typer.Typer(
    name="cordrest",
    help="cordrest: send requests to the Discord REST API with rate-limit aware retries.",
    add_completion=False,
)

TokenOption = Annotated[
    Optional[str],
    typer.Option("--token", "-t", help="Token to authorize with. Defaults to CORDREST_TOKEN.")
]
TokenTypeOption = Annotated[
    Optional[str],
    typer.Option("--token-type", help="Authorization scheme: bot, bearer or none.")
]
TimeoutOption = Annotated[
    Optional[int],
    typer.Option("--timeout", help="Connection timeout in milliseconds.")
]
RetriesOption = Annotated[
    Optional[int],
    typer.Option("--retries", help="Maximum retries when rate limited.")
]


def _parse_token_type(value: Optional[str]) -> Optional[TokenType]:
    if value is None:
        return None
    try:
        return TokenType[value.strip().upper()]
    except KeyError:
        raise typer.BadParameter(f"Unknown token type '{value}'. Use bot, bearer or none.")


def _run(success: bool) -> None:
    if not success:
        raise typer.Exit(code=1)


# --- CLI Commands ---

@app.command(name="request")
def request_command(
    method: Annotated[str, typer.Argument(help="HTTP method (GET, POST, PUT, PATCH, DELETE).")],
    path: Annotated[str, typer.Argument(help="Resource path, e.g. 'channels/123/messages?limit=5'.")],
    body: Annotated[Optional[str], typer.Option("--body", "-b", help="JSON request body.")] = None,
    form: Annotated[Optional[str], typer.Option("--form", help="Pre-encoded form request body.")] = None,
    token: TokenOption = None,
    token_type: TokenTypeOption = None,
    timeout: TimeoutOption = None,
    retries: RetriesOption = None,
):
    """Dispatch a single API request and print the decoded response."""
    handler: CommandHandler = get_dependencies()['command_handler']
    options = handler.build_options(token, _parse_token_type(token_type), timeout, retries)
    _run(asyncio.run(handler.handle_request(method, path, json_body=body, form_body=form, options=options)))


@app.command(name="me")
def me_command(
    token: TokenOption = None,
    token_type: TokenTypeOption = None,
    timeout: TimeoutOption = None,
    retries: RetriesOption = None,
):
    """Show the user the token belongs to."""
    handler: CommandHandler = get_dependencies()['command_handler']
    options = handler.build_options(token, _parse_token_type(token_type), timeout, retries)
    _run(asyncio.run(handler.handle_me(options)))


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
