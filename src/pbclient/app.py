"""Command line entry point for pbclient.

Builds a :class:`~pbclient.client.Client` from the config file, the
``PBCLIENT_*`` environment and the global flags, sends one request, and
prints the result: status line to stderr, body to stdout.

Example::

    $ export PBCLIENT_SHARED_SECRET=env:PB_TOKEN
    $ pbclient --json get /features
    $ pbclient post /features --body '{"name": "Dark mode"}'
    $ pbclient upload /attachments ./mockup.png
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import httpx
import typer

from pbclient import __version__
from pbclient.client import Client
from pbclient.config import resolve_options
from pbclient.exceptions import PbclientError
from pbclient.exit_codes import EXIT_CONNECTION_ERROR
from pbclient.output import OutputFormat, OutputManager, get_output, set_output, setup_logging
from pbclient.response import format_api_response


app = typer.Typer(
    name="pbclient",
    help="Send requests to the Productboard REST API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"pbclient {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    site: Optional[str] = typer.Option(
        None, "--site", help="Base URL of the API (overrides config and environment)."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Options file (default: ~/.config/pbclient/config.json)."
    ),
    header: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help="Extra request header as 'Name: value'. Repeatable."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress the status line."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    debug: bool = typer.Option(False, "--debug", help="Log every request sent (http_debug)."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~pbclient.output.OutputManager`, configures
    logging, and stores the connection flags in ``ctx.obj``.
    """
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))
    setup_logging(verbose=verbose, http_debug=debug)

    ctx.ensure_object(dict)
    ctx.obj["site"] = site
    ctx.obj["config_file"] = config_file
    ctx.obj["headers"] = _parse_headers(header or [])
    ctx.obj["debug"] = debug


def _parse_headers(values: List[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Header must look like 'Name: value', got {raw!r}")
        headers[name.strip()] = value.strip()
    return headers


def _parse_body(body: Optional[str]) -> Any:  # noqa: ANN401
    """Parse *body* as JSON if possible, returning the raw string on failure."""
    if body is None:
        return ""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body


def _build_client(ctx: typer.Context) -> Client:
    overrides = {
        "site": ctx.obj.get("site"),
        "http_debug": True if ctx.obj.get("debug") else None,
    }
    options = resolve_options(ctx.obj.get("config_file"), overrides)
    return Client(options)


def _run(ctx: typer.Context, call: Callable[[Client, dict[str, str]], httpx.Response]) -> None:
    """Build a client, send one request, and map failures to exit codes."""
    output = get_output()
    try:
        with _build_client(ctx) as client:
            response = call(client, dict(ctx.obj["headers"]))
    except PbclientError as exc:
        output.error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    except httpx.TransportError as exc:
        output.error(f"Connection failed: {exc}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR)
    format_api_response(response)


@app.command("get")
def get_command(ctx: typer.Context, path: str = typer.Argument(..., help="Request path.")) -> None:
    """Send a GET request."""
    _run(ctx, lambda client, headers: client.get(path, headers))


@app.command("head")
def head_command(ctx: typer.Context, path: str = typer.Argument(..., help="Request path.")) -> None:
    """Send a HEAD request."""
    _run(ctx, lambda client, headers: client.head(path, headers))


@app.command("delete")
def delete_command(ctx: typer.Context, path: str = typer.Argument(..., help="Request path.")) -> None:
    """Send a DELETE request."""
    _run(ctx, lambda client, headers: client.delete(path, headers))


@app.command("post")
def post_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Request path."),
    body: Optional[str] = typer.Option(None, "--body", "-d", help="Request body (JSON)."),
) -> None:
    """Send a POST request with a JSON body."""
    payload = _parse_body(body)
    _run(ctx, lambda client, headers: client.post(path, payload, headers))


@app.command("put")
def put_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Request path."),
    body: Optional[str] = typer.Option(None, "--body", "-d", help="Request body (JSON)."),
) -> None:
    """Send a PUT request with a JSON body."""
    payload = _parse_body(body)
    _run(ctx, lambda client, headers: client.put(path, payload, headers))


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Request path."),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload."),
) -> None:
    """Upload a file as multipart/form-data."""
    _run(ctx, lambda client, headers: client.post_multipart(path, file, headers))


def main() -> None:
    """CLI entry point invoked by the ``pbclient`` console script."""
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
