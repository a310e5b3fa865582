from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from wireprobe.config import Settings
from wireprobe.domain.codec import encode_record
from wireprobe.domain.models import Record


def build_exchange_table(sent: Record, received: Record) -> Table:
    """
    Tabulate one exchange field by field.

    The last column flags whether each received value is the sent value plus
    one (with 32-bit wraparound), which is what a healthy server returns.
    """
    expected = sent.incremented()
    table = Table(title="Record Exchange", box=box.ROUNDED)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Sent", justify="right", style="magenta")
    table.add_column("Received", justify="right", style="green")
    table.add_column("OK", justify="center")

    for field in ("foo", "bar", "baz"):
        ok = getattr(received, field) == getattr(expected, field)
        table.add_row(
            field.capitalize(),
            str(getattr(sent, field)),
            str(getattr(received, field)),
            "[green]✓[/green]" if ok else "[red]✗[/red]",
        )
    return table


def format_wire_bytes(record: Record) -> str:
    """Space-separated hex dump of the 12-byte encoding."""
    return encode_record(record).hex(" ")


def print_exchange(sent: Record, received: Record, console: Optional[Console] = None) -> None:
    """
    Render an exchange as a rich table followed by the raw wire bytes.

    The hex lines are printed with soft wrapping so a byte dump is never split
    across lines on narrow terminals.
    """
    console = console or Console()
    console.print(build_exchange_table(sent, received))
    console.print(f"sent     {format_wire_bytes(sent)}", soft_wrap=True, highlight=False)
    console.print(f"received {format_wire_bytes(received)}", soft_wrap=True, highlight=False)


def print_settings(settings: Settings, console: Optional[Console] = None) -> None:
    """Render the effective configuration as a two-column table."""
    console = console or Console()
    table = Table(title="wireprobe configuration", box=box.ROUNDED)
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    for name, value in settings.model_dump().items():
        table.add_row(name, "-" if value is None else str(value))
    console.print(table)


__all__ = ["build_exchange_table", "format_wire_bytes", "print_exchange", "print_settings"]
