"""Rich formatting utilities for the CLI.

Keeps all Rich rendering (tables, panels, syntax) in a dedicated module
that knows nothing about conversion logic.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from cypher_converter.domain.models.conversion import ConversionResult
    from cypher_converter.domain.models.formats import FormatDescriptor
    from cypher_converter.domain.models.history import HistoryEntry

console = Console()

_STATUS_STYLES = {
    "pending": "yellow",
    "completed": "green",
    "failed": "red",
}

# Catalog id -> lexer name for previews
_LEXERS = {
    "markdown": "markdown",
    "txt": "text",
    "csv": "text",
}

_PREVIEW_CHARS = 2000


def _when(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


# ---------------------------------------------------------------------------
# Success / error panels
# ---------------------------------------------------------------------------


def success_panel(message: str, title: str = "Cypher Converter") -> None:
    """Print a green success panel."""
    console.print(Panel(message, title=title, border_style="green"))


def error_message(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]❌ {message}[/]")


# ---------------------------------------------------------------------------
# JSON / text rendering
# ---------------------------------------------------------------------------


def json_panel(raw_json: str, title: str = "⚙️  Active settings") -> None:
    """Render JSON inside a syntax-highlighted panel."""
    console.print(
        Panel(
            Syntax(raw_json, "json", theme="monokai", line_numbers=True),
            title=title,
            border_style="blue",
        )
    )


def result_preview(result: ConversionResult) -> None:
    """Show the converted text (truncated) with syntax highlighting."""
    if result.is_binary:
        console.print("[dim]Binary result — preview not available.[/]")
        return
    text = result.content
    if len(text) > _PREVIEW_CHARS:
        text = text[:_PREVIEW_CHARS] + "\n…"
    lexer = _LEXERS.get(result.target_format, result.target_format)
    console.print(
        Panel(
            Syntax(text, lexer, theme="monokai", word_wrap=True),
            title=f"📄 {result.target_format}",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# Format catalog
# ---------------------------------------------------------------------------


def formats_table(formats: Iterable[FormatDescriptor]) -> None:
    """Print the supported formats."""
    table = Table(title="🧬 Supported Formats", show_header=True, border_style="blue")
    table.add_column("Id", style="cyan")
    table.add_column("Label")
    table.add_column("Kind", style="magenta")
    table.add_column("Extension", style="green")

    for fmt in formats:
        table.add_row(fmt.id, fmt.label, fmt.kind.value, f".{fmt.extension}")

    console.print(table)


# ---------------------------------------------------------------------------
# History rendering
# ---------------------------------------------------------------------------


def history_table(entries: list[HistoryEntry]) -> None:
    """Print history entries, most recent first."""
    if not entries:
        console.print("[dim]No conversions recorded yet.[/]")
        return

    table = Table(title="🕘 Conversion History", show_header=True, border_style="blue")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("When", no_wrap=True)
    table.add_column("File")
    table.add_column("Conversion")
    table.add_column("Status")
    table.add_column("Output")

    for entry in entries:
        style = _STATUS_STYLES.get(entry.status.value, "white")
        if entry.result is None:
            output = "—"
        else:
            output = "binary" if entry.is_binary else f"{len(entry.result)} chars"
        table.add_row(
            entry.id,
            _when(entry.timestamp),
            entry.file_name,
            f"{entry.source_format} → {entry.target_format}",
            f"[{style}]{entry.status.value}[/]",
            output,
        )

    console.print(table)


def entry_panel(entry: HistoryEntry) -> None:
    """Print one history entry with a short preview of its result."""
    style = _STATUS_STYLES.get(entry.status.value, "white")
    lines = [
        f"File: [cyan]{entry.file_name}[/]",
        f"When: {_when(entry.timestamp)}",
        f"Conversion: {entry.source_format} → {entry.target_format}",
        f"Status: [{style}]{entry.status.value}[/]",
    ]
    if entry.result is not None:
        if entry.is_binary:
            lines.append(f"Result: binary data URI ({len(entry.result)} chars)")
        else:
            preview = entry.result[:400] + ("…" if len(entry.result) > 400 else "")
            lines.append(f"Result:\n{preview}")
    console.print(Panel("\n".join(lines), title=f"🧾 {entry.id}", border_style=style))


def batch_table(rows: list[tuple[str, str, str]]) -> None:
    """Print ``(file, status, detail)`` rows from a batch run."""
    table = Table(title="📦 Batch Conversion", show_header=True, border_style="blue")
    table.add_column("File", style="cyan")
    table.add_column("Status")
    table.add_column("Detail")
    for name, status, detail in rows:
        style = _STATUS_STYLES.get(status, "white")
        table.add_row(name, f"[{style}]{status}[/]", detail)
    console.print(table)
