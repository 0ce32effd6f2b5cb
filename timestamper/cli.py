"""TimeStamper CLI: Typer entry point with Rich formatting."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from timestamper.commands import get_registry
from timestamper.editor import FileDocument
from timestamper.logging_setup import setup_logging
from timestamper.plugin import TimeStamperPlugin
from timestamper.prompt import CONFIRM_KEY, LABEL, PLACEHOLDER
from timestamper.settings import SETTING_FIELDS, YamlSettingsStore

app = typer.Typer(
    name="timestamper",
    help="TimeStamper: insert formatted date/time stamps into text files.",
    no_args_is_help=True,
)
settings_app = typer.Typer(help="Show and change TimeStamper settings.", no_args_is_help=True)
app.add_typer(settings_app, name="settings")
console = Console()

_DEFAULT_SETTINGS = Path("timestamper.yaml")

SettingsOption = Annotated[
    Path,
    typer.Option("--settings", "-s", help="Path to the settings file"),
]
DocumentArgument = Annotated[Path, typer.Argument(help="Text file to insert the stamp into")]
LineOption = Annotated[
    Optional[int],
    typer.Option("--line", "-l", min=1, help="Caret line (1-based, default: end of file)"),
]
ColumnOption = Annotated[
    Optional[int],
    typer.Option("--column", "-c", min=1, help="Caret column (1-based, needs --line)"),
]
SelectOption = Annotated[
    int,
    typer.Option("--select", min=0, help="Replace this many characters after the caret"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    log_file: Annotated[
        Optional[Path], typer.Option("--log-file", help="Also write logs to this file")
    ] = None,
) -> None:
    """Insert date/time stamps at a caret position in a text file."""
    if verbose or log_file is not None:
        setup_logging(logging.DEBUG if verbose else logging.INFO, log_file)


def _load_plugin(settings_path: Path) -> TimeStamperPlugin:
    plugin = TimeStamperPlugin(YamlSettingsStore(settings_path))
    try:
        plugin.load()
    except ValueError as exc:
        console.print(f"[red]Invalid settings: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    return plugin


def _open_document(path: Path, line: int | None, column: int | None, select: int) -> FileDocument:
    if column is not None and line is None:
        raise typer.BadParameter("--column requires --line", param_hint="'--column'")
    try:
        document = FileDocument.open(path)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    if line is not None:
        document.set_cursor(line - 1, (column or 1) - 1)
    if select:
        document.select(document.head, document.head + select)
    return document


def _report(document: FileDocument, text: str, title: str) -> None:
    line, column = document.cursor_position()
    console.print(
        Panel(
            f"Inserted {escape(repr(text))}\nCaret now at line {line + 1}, column {column + 1}",
            title=f"[green]{title}[/green]",
            border_style="green",
        )
    )


def _insert_preconfigured(
    command_id: str,
    title: str,
    path: Path,
    settings: Path,
    line: int | None,
    column: int | None,
    select: int,
) -> None:
    """Load settings and the document, run one preconfigured command, report it."""
    plugin = _load_plugin(settings)
    document = _open_document(path, line, column, select)
    try:
        text = plugin.run(command_id, document)
    except ValueError as exc:
        console.print(f"[red]Could not format stamp: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    _report(document, text, title)


@app.command()
def time(
    path: DocumentArgument,
    settings: SettingsOption = _DEFAULT_SETTINGS,
    line: LineOption = None,
    column: ColumnOption = None,
    select: SelectOption = 0,
) -> None:
    """Insert a stamp using the preconfigured time format."""
    _insert_preconfigured("obsidian-fast-timestamp", "time", path, settings, line, column, select)


@app.command()
def date(
    path: DocumentArgument,
    settings: SettingsOption = _DEFAULT_SETTINGS,
    line: LineOption = None,
    column: ColumnOption = None,
    select: SelectOption = 0,
) -> None:
    """Insert a stamp using the preconfigured date format."""
    _insert_preconfigured("obsidian-fast-datestamp", "date", path, settings, line, column, select)


@app.command()
def custom(
    path: DocumentArgument,
    settings: SettingsOption = _DEFAULT_SETTINGS,
    line: LineOption = None,
    column: ColumnOption = None,
    select: SelectOption = 0,
) -> None:
    """Prompt for a format string, insert the stamp and remember the format."""
    plugin = _load_plugin(settings)
    document = _open_document(path, line, column, select)
    prompt = plugin.run("obsidian-custom-timestamp", document)

    console.print(f"[dim]{PLACEHOLDER}[/dim]")
    try:
        value = typer.prompt(LABEL.rstrip(":"), default=prompt.value, show_default=True)
    except typer.Abort:
        prompt.dismiss()
        console.print("\n[dim]Aborted.[/dim]")
        return

    prompt.set_value(value)
    try:
        prompt.key_press(CONFIRM_KEY)
    except ValueError as exc:
        console.print(f"[red]Could not format stamp: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    _report(document, prompt.result or "", "custom")


@app.command(name="commands")
def list_commands() -> None:
    """List the registered insertion commands."""
    table = Table(title="TimeStamper Commands")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name")
    for command in get_registry().values():
        table.add_row(command.id, command.name)
    console.print(table)


def _show_settings(plugin: TimeStamperPlugin) -> None:
    current = plugin.settings.to_record()

    table = Table(title="TimeStamper Settings")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Setting", style="magenta")
    table.add_column("Value", no_wrap=True)
    table.add_column("Description", style="dim")

    for entry in SETTING_FIELDS:
        value = current[entry.alias]
        if isinstance(value, bool):
            shown = "[green]on[/green]" if value else "[dim]off[/dim]"
        else:
            shown = escape(repr(value))
        table.add_row(entry.alias, entry.name, shown, entry.description)

    console.print(table)


@settings_app.command(name="show")
def settings_show(settings: SettingsOption = _DEFAULT_SETTINGS) -> None:
    """Display the current settings."""
    _show_settings(_load_plugin(settings))


@settings_app.command(name="set")
def settings_set(
    key: Annotated[str, typer.Argument(help="Setting key, e.g. dateStampFormat or make_bold")],
    value: Annotated[str, typer.Argument(help="New value (true/false for switches)")],
    settings: SettingsOption = _DEFAULT_SETTINGS,
) -> None:
    """Change one setting and save it."""
    plugin = _load_plugin(settings)
    try:
        plugin.update_setting(key, value)
    except KeyError as exc:
        console.print(f"[red]Unknown setting: {escape(key)}[/red]")
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        console.print(f"[red]Invalid value for {escape(key)}: {escape(repr(value))}[/red]")
        raise typer.Exit(code=1) from exc
    _show_settings(plugin)


@settings_app.command(name="reset")
def settings_reset(settings: SettingsOption = _DEFAULT_SETTINGS) -> None:
    """Restore the default settings."""
    plugin = _load_plugin(settings)
    plugin.reset_settings()
    _show_settings(plugin)
