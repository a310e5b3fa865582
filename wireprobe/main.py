from __future__ import annotations

import signal
import sys
from typing import Optional

import typer

from wireprobe.client import exchange
from wireprobe.config import get_settings
from wireprobe.dispatch import available_dispatchers, resolve_dispatcher
from wireprobe.domain.codec import DecodeError
from wireprobe.domain.models import Record
from wireprobe.infrastructure.net_factory import bind_listener
from wireprobe.listener import Listener
from wireprobe.reporter import print_exchange, print_settings
from wireprobe.utils.logging import configure_logging, get_logger

app = typer.Typer(help="wireprobe: fixed-size record diagnostic server and client.")
log = get_logger("wireprobe")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    print_settings(get_settings())


@app.command()
def dispatchers() -> None:
    """
    List available dispatch policies.
    """
    typer.echo("Available dispatchers: " + ", ".join(available_dispatchers()))


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None, "--host", "-H", help="Interface to bind (default from settings)."
    ),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Port to listen on (default from settings)."
    ),
    dispatch: Optional[str] = typer.Option(
        None,
        "--dispatch",
        "-d",
        help="Dispatch policy: " + ", ".join(available_dispatchers()) + ".",
    ),
) -> None:
    """
    Run the record-increment server until interrupted.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        dispatcher = resolve_dispatcher(dispatch or settings.server_dispatch)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)

    try:
        sock = bind_listener(host=host, port=port)
    except OSError as exc:
        log.critical(f"[BIND FAILED] {exc}", extra={"error": str(exc)})
        raise typer.Exit(code=1)

    with Listener(sock, dispatcher=dispatcher, settings=settings) as listener:
        signal.signal(signal.SIGTERM, lambda signum, frame: listener.shutdown())
        try:
            listener.serve_forever()
        except KeyboardInterrupt:
            log.info("[INTERRUPTED] shutting down")


@app.command()
def send(
    foo: int = typer.Argument(5, help="Foo field."),
    bar: int = typer.Argument(3, help="Bar field."),
    baz: int = typer.Argument(7, help="Baz field."),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Server host."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Server port."),
) -> None:
    """
    Send one record to a server and show the reply.

    Put -- before the fields when any of them is negative, otherwise it is
    read as an option: wireprobe send -- -5 3 7
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        record = Record(foo=foo, bar=bar, baz=baz)
    except ValueError as exc:
        typer.echo(f"Invalid record: {exc}", err=True)
        raise typer.Exit(code=2)

    try:
        reply = exchange(record, host=host, port=port)
    except (OSError, DecodeError) as exc:
        typer.echo(f"Exchange failed: {exc}", err=True)
        raise typer.Exit(code=1)

    print_exchange(record, reply)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
