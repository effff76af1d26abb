"""Decorators for vcoll command line functionality."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console

from .errors import VcollError

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def handle_cli_errors(func: Callable) -> Callable:
    """
    Decorator to handle common command errors.

    Centralizes error reporting for:
    - FileNotFoundError: Input file doesn't exist
    - ValueError: Unparseable input or invalid arguments
    - VcollError: Invalid filter, ordering or operation
    - General exceptions: Unexpected errors (logged with traceback)
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except FileNotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] File not found: {e}")
            raise typer.Exit(code=1)
        except VcollError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except ValueError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid input: {e}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=1)

    return wrapper
