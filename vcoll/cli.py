import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from .collection import Collection
from .config import VcollConfig, get_config_path, load_config, update_config
from .decorators import console as error_console
from .decorators import handle_cli_errors
from .loaders import load_document, load_records, parse_where
from .replay import replay as run_script
from .virtual import VirtualCollection

# Initialize Rich Traceback for better error messages
install(show_locals=False)

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
log_console = Console(stderr=True)
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, console=log_console)]
)
logger = logging.getLogger("vcoll")

app = typer.Typer(help="Inspect live filtered views over record files.")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    vcoll - live, filtered and sorted views over record collections.

    Load records from JSON or YAML, filter them with key=value terms, sort
    them by an attribute and watch how a view reacts to mutations.
    """
    config = load_config()
    ctx.obj = config
    for output in (console, error_console, log_console):
        output.no_color = not config.cli.color
    if verbose or config.cli.verbose:
        logger.setLevel(logging.DEBUG)
        logger.debug("Verbose mode enabled")


# ============================================================================
# Rendering
# ============================================================================

def _columns(records: List[dict]) -> List[str]:
    columns: List[str] = []
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)
    return columns


def _cell(value: Any, width: int) -> str:
    text = "" if value is None else str(value)
    if len(text) > width:
        text = text[: width - 1] + "…"
    return text


def render_view(view: VirtualCollection, config: VcollConfig, as_json: bool = False, limit: Optional[int] = None) -> None:
    """Print a view as a table or as JSON."""
    rows = view.to_json()
    if limit is not None:
        rows = rows[:limit]

    if as_json or config.output.format == "json":
        typer.echo(json.dumps(rows, indent=config.output.json_indent, default=str))
        return

    page = rows[: config.cli.page_size]
    table = Table(caption=f"{len(view)} of {len(view.collection)} records")
    columns = _columns(page)
    for column in columns:
        table.add_column(column, overflow="fold")
    for row in page:
        table.add_row(*(_cell(row.get(c), config.output.max_column_width) for c in columns))
    console.print(table)
    if len(rows) > len(page):
        console.print(f"[dim]... {len(rows) - len(page)} more (page size {config.cli.page_size})[/dim]")


def _describe(event: str, args: tuple) -> str:
    target = args[0] if args else None
    options = args[-1] if args and isinstance(args[-1], dict) else {}
    if getattr(target, "cid", None) is not None:
        label = f"id={target.id}" if target.id is not None else target.cid
        if "index" in options:
            return f"{event} {label} at {options['index']}"
        return f"{event} {label}"
    return event


def _build_view(file: Path, where: Optional[List[str]], order_by: Optional[str], select: Optional[str]):
    records = load_records(file, select=select)
    base = Collection(records)
    view = VirtualCollection(base, filter=parse_where(where), ordering=order_by, name=file.name)
    logger.debug(f"Loaded {len(base)} records from {file}")
    return base, view


# ============================================================================
# Commands
# ============================================================================

@app.command()
@handle_cli_errors
def show(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON or YAML file holding a list of records"),
    where: Optional[List[str]] = typer.Option(None, "--where", "-w", help="Filter term key=value, or !key for unset (repeatable)"),
    order_by: Optional[str] = typer.Option(None, "--order-by", "-o", help="Attribute to sort the view by"),
    select: Optional[str] = typer.Option(None, "--select", "-s", help="JMESPath expression locating the record list"),
    as_json: bool = typer.Option(False, "--json", help="Print the view as JSON"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Show at most N records"),
):
    """Show the records of FILE that pass the filter, in view order."""
    config: VcollConfig = ctx.obj or load_config()
    _, view = _build_view(file, where, order_by, select)
    render_view(view, config, as_json=as_json, limit=limit)


@app.command()
@handle_cli_errors
def replay(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON or YAML file holding the initial records"),
    script: Path = typer.Argument(..., help="JSON or YAML list of mutation steps"),
    where: Optional[List[str]] = typer.Option(None, "--where", "-w", help="Filter term key=value, or !key for unset (repeatable)"),
    order_by: Optional[str] = typer.Option(None, "--order-by", "-o", help="Attribute to sort the view by"),
    select: Optional[str] = typer.Option(None, "--select", "-s", help="JMESPath expression locating the record list"),
    as_json: bool = typer.Option(False, "--json", help="Print the final view as JSON"),
):
    """
    Apply SCRIPT to the records of FILE and print what the view emits.

    Each step mutates the base collection; the lines printed are the
    notifications the filtered view re-emits in its own coordinates.
    """
    config: VcollConfig = ctx.obj or load_config()
    steps = load_document(script)
    if not isinstance(steps, list):
        raise ValueError(f"Script {script} must be a list of steps")

    base, view = _build_view(file, where, order_by, select)
    subscription = view.on("all", lambda event, *args: console.print(f"  [cyan]{_describe(event, args)}[/cyan]"))

    def announce(number, step):
        console.print(f"[bold]step {number}[/bold]: {step.get('op')}")

    try:
        run_script(base, steps, on_step=announce)
    finally:
        subscription.dispose()
        view.stop_listening()

    render_view(view, config, as_json=as_json)


@app.command("config")
@handle_cli_errors
def config_command(
    show: bool = typer.Option(False, "--show", help="Print the current configuration"),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--quiet", help="Default verbosity"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Colored output"),
    page_size: Optional[int] = typer.Option(None, "--page-size", help="Rows shown per table"),
    output_format: Optional[str] = typer.Option(None, "--format", help="Default output: table or json"),
):
    """View or update the vcoll configuration."""
    changes = {
        "cli_verbose": verbose,
        "cli_color": color,
        "cli_page_size": page_size,
        "output_format": output_format,
    }
    if any(value is not None for value in changes.values()):
        config = update_config(**changes)
        console.print(f"[green]Configuration saved to {get_config_path()}[/green]")
    else:
        config = load_config()
        show = True

    if show:
        typer.echo(json.dumps(config.to_dict(), indent=2))


if __name__ == "__main__":
    app()
