"""Console output helpers shared by CLI commands."""

from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_model_json(model: BaseModel | list[BaseModel]) -> None:
    """Print one or more pydantic models as JSON."""
    if isinstance(model, list):
        payload = "[" + ",".join(m.model_dump_json() for m in model) + "]"
    else:
        payload = model.model_dump_json()
    console.print_json(payload)
