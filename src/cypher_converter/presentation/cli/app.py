"""Thin CLI wrapper — Typer commands that delegate to Use Cases.

All domain logic is accessed through the Container (bootstrap.py).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.logging import RichHandler

from cypher_converter.presentation.cli.formatters import (
    batch_table,
    console,
    entry_panel,
    error_message,
    formats_table,
    history_table,
    json_panel,
    result_preview,
    success_panel,
)

app = typer.Typer(
    name="cypher",
    help="🧬 Cypher Converter — convert text, code, data, documents and images",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

history_app = typer.Typer(
    name="history",
    help="🕘 Browse, archive and clear the conversion history",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
app.add_typer(history_app, name="history")

theme_app = typer.Typer(
    name="theme",
    help="🎨 Show or change the display theme",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
app.add_typer(theme_app, name="theme")

config_app = typer.Typer(
    name="config",
    help="⚙️  Manage converter settings",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------

_state: dict = {"data_dir": None}


def _build_container(data_dir: Path | None = None):
    """Create the composition root, optionally with a different data dir."""
    from cypher_converter.bootstrap import Container

    return Container(data_dir=data_dir)


def _container():
    return _build_container(_state["data_dir"])


def _resolve_format(name: str, option: str) -> str:
    from cypher_converter.domain.models.formats import CATALOG

    format_id = CATALOG.resolve(name)
    if format_id is None:
        error_message(f"Unknown format for {option}: {name!r}. Run 'cypher formats'.")
        raise typer.Exit(code=1)
    return format_id


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log progress to stderr")
    ] = False,
    data_dir: Annotated[
        Optional[Path],
        typer.Option("--data-dir", help="Directory for history and preferences"),
    ] = None,
) -> None:
    """Cypher Converter command line."""
    _state["data_dir"] = data_dir
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
            force=True,
        )


# ---------------------------------------------------------------------------
# cypher convert
# ---------------------------------------------------------------------------


@app.command()
def convert(
    source: Annotated[Path, typer.Argument(help="File to convert")],
    to: Annotated[str, typer.Option("--to", "-t", help="Target format id")],
    source_format: Annotated[
        str, typer.Option("--from", "-f", help="Source format id, or 'auto'")
    ] = "auto",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file or directory (default: cwd)"),
    ] = None,
    show: Annotated[
        bool, typer.Option("--show", help="Preview text results in the terminal")
    ] = False,
) -> None:
    """Convert one file to the [bold]--to[/] format."""
    from cypher_converter.domain.errors import ConversionFailedError, SourceReadError
    from cypher_converter.domain.models.formats import AUTO
    from cypher_converter.infrastructure.readers.source_reader import read_source
    from cypher_converter.infrastructure.writers.result_writer import write_result

    target = _resolve_format(to, "--to")
    declared = AUTO if source_format.lower() == AUTO else _resolve_format(source_format, "--from")

    try:
        request = read_source(source, declared)
    except (FileNotFoundError, SourceReadError) as e:
        error_message(str(e))
        raise typer.Exit(code=1)

    container = _container()
    try:
        result = container.run_conversion().execute(
            request.model_copy(update={"target_format": target})
        )
    except ConversionFailedError as e:
        error_message(str(e))
        raise typer.Exit(code=1)

    written = write_result(result.result, output or Path.cwd())
    success_panel(
        f"✅ Converted successfully:\n"
        f"  📥 Source: [cyan]{source}[/] ({result.source_format})\n"
        f"  📤 Output: [bold green]{written}[/] ({result.target_format})\n"
        f"  🧾 History entry: [dim]{result.entry_id}[/]",
        title="🔄 Cypher Convert",
    )
    if show:
        result_preview(result)


# ---------------------------------------------------------------------------
# cypher batch
# ---------------------------------------------------------------------------


@app.command()
def batch(
    sources: Annotated[list[Path], typer.Argument(help="Files to convert")],
    to: Annotated[str, typer.Option("--to", "-t", help="Target format id")],
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-d", help="Directory for the results (default: cwd)"),
    ] = None,
) -> None:
    """Convert several files concurrently to the same format."""
    from cypher_converter.domain.errors import ConversionFailedError, SourceReadError
    from cypher_converter.domain.models.formats import CATALOG
    from cypher_converter.infrastructure.readers.source_reader import read_source
    from cypher_converter.infrastructure.writers.result_writer import write_result

    target = _resolve_format(to, "--to")
    extension = CATALOG.get(target).extension
    destination = output_dir or Path.cwd()
    destination.mkdir(parents=True, exist_ok=True)

    rows: list[tuple[str, str, str]] = []
    requests = []
    for source in sources:
        try:
            request = read_source(source)
        except (FileNotFoundError, SourceReadError) as e:
            rows.append((str(source), "failed", str(e)))
            continue
        requests.append(request.model_copy(update={"target_format": target}))

    use_case = _container().run_conversion()
    try:
        outcomes = use_case.run_many(requests)
    finally:
        use_case.shutdown()

    failures = sum(1 for _name, status, _detail in rows if status == "failed")
    used: set[Path] = set()
    for request, outcome in zip(requests, outcomes):
        name = request.file_name or "Unknown"
        if isinstance(outcome, ConversionFailedError):
            failures += 1
            rows.append((name, "failed", str(outcome)))
            continue
        # Suggested names can collide within one millisecond; keep the source stem
        stem = Path(name).stem
        target_path = destination / f"{stem}.{extension}"
        if target_path in used:
            target_path = destination / f"{stem}-{outcome.entry_id}.{extension}"
        used.add(target_path)
        written = write_result(outcome.result, target_path)
        rows.append((name, "completed", str(written)))

    batch_table(rows)
    if failures:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# cypher detect / formats
# ---------------------------------------------------------------------------


@app.command()
def detect(
    source: Annotated[Path, typer.Argument(help="File whose format to guess")],
) -> None:
    """Guess the format of a file's content."""
    from cypher_converter.domain.errors import SourceReadError
    from cypher_converter.domain.models.formats import AUTO
    from cypher_converter.infrastructure.readers.source_reader import read_source

    try:
        request = read_source(source)
    except (FileNotFoundError, SourceReadError) as e:
        error_message(str(e))
        raise typer.Exit(code=1)

    if request.source_format != AUTO:
        detected = request.source_format
    else:
        detected = _container().run_conversion().detect(request.payload)
    console.print(f"🔎 [cyan]{source}[/] looks like [bold green]{detected}[/]")


@app.command()
def formats() -> None:
    """List the supported formats."""
    from cypher_converter.domain.models.formats import CATALOG

    formats_table(CATALOG.list())


# ---------------------------------------------------------------------------
# cypher history list / show / export / import / clear
# ---------------------------------------------------------------------------


@history_app.command("list")
def history_list(
    status: Annotated[
        Optional[str],
        typer.Option("--status", "-s", help="Only pending, completed or failed entries"),
    ] = None,
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-n", min=1, help="Show at most N entries")
    ] = None,
) -> None:
    """List conversions, most recent first."""
    from cypher_converter.domain.models.enums import ConversionStatus

    wanted = None
    if status is not None:
        try:
            wanted = ConversionStatus(status.lower())
        except ValueError:
            error_message(f"Unknown status: {status!r}")
            raise typer.Exit(code=1)

    history_table(_container().manage_history().list_entries(status=wanted, limit=limit))


@history_app.command("show")
def history_show(
    entry_id: Annotated[str, typer.Argument(help="History entry id")],
) -> None:
    """Show one history entry."""
    from cypher_converter.domain.errors import EntryNotFoundError

    try:
        entry = _container().manage_history().get(entry_id)
    except EntryNotFoundError as e:
        error_message(str(e))
        raise typer.Exit(code=1)
    entry_panel(entry)


@history_app.command("export")
def history_export(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Archive file or directory (default: cwd)"),
    ] = None,
) -> None:
    """Save the full history as a JSON archive."""
    use_case = _container().manage_history()
    written = use_case.export_to(output or Path.cwd())
    success_panel(
        f"✅ History exported to: [bold green]{written}[/]",
        title="🗄️  History Export",
    )


@history_app.command("import")
def history_import(
    archive: Annotated[Path, typer.Argument(help="Archive written by 'history export'")],
) -> None:
    """Replace the history with the contents of an archive."""
    if not archive.is_file():
        error_message(f"File not found: {archive}")
        raise typer.Exit(code=1)

    try:
        entries = _container().manage_history().import_from(archive)
    except (ValidationError, ValueError) as e:
        error_message(f"Invalid history archive: {e}")
        raise typer.Exit(code=1)
    success_panel(
        f"✅ Restored [cyan]{len(entries)}[/] entries from [bold green]{archive}[/]",
        title="🗄️  History Import",
    )


@history_app.command("clear")
def history_clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
) -> None:
    """Delete every history entry. This cannot be undone."""
    if not yes:
        confirmed = typer.confirm("Delete the entire conversion history?")
        if not confirmed:
            raise typer.Abort()

    removed = _container().manage_history().clear()
    success_panel(f"🧹 Removed [cyan]{removed}[/] entries", title="🕘 History")


# ---------------------------------------------------------------------------
# cypher theme show / toggle / set
# ---------------------------------------------------------------------------


@theme_app.command("show")
def theme_show() -> None:
    """Print the current theme."""
    console.print(f"🎨 Theme: [bold]{_container().preferences.theme.value}[/]")


@theme_app.command("toggle")
def theme_toggle() -> None:
    """Switch between dark and light."""
    theme = _container().preferences.toggle()
    console.print(f"🎨 Theme is now [bold]{theme.value}[/]")


@theme_app.command("set")
def theme_set(
    value: Annotated[str, typer.Argument(help="light or dark")],
) -> None:
    """Set the theme explicitly."""
    from cypher_converter.domain.models.enums import Theme

    try:
        theme = Theme(value.lower())
    except ValueError:
        error_message(f"Unknown theme: {value!r} (use light or dark)")
        raise typer.Exit(code=1)
    _container().preferences.set_theme(theme)
    console.print(f"🎨 Theme is now [bold]{theme.value}[/]")


# ---------------------------------------------------------------------------
# cypher config show / reset / path
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show() -> None:
    """Show the active settings."""
    json_panel(_container().settings.model_dump_json(indent=2))


@config_app.command("reset")
def config_reset(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
) -> None:
    """Restore the default settings."""
    if not yes:
        confirmed = typer.confirm("Overwrite the settings file with defaults?")
        if not confirmed:
            raise typer.Abort()

    manager = _container().settings_manager
    manager.reset_to_defaults()
    success_panel(
        f"✅ Settings reset: [bold green]{manager.settings_path}[/]",
        title="⚙️  Config Reset",
    )


@config_app.command("path")
def config_path() -> None:
    """Print where the settings file lives."""
    typer.echo(str(_container().settings_manager.settings_path))


if __name__ == "__main__":
    app()
