"""Console output helpers.

Usage:
    from dropmodifier_cli.console import console, print_error, print_warning

    console.print("Hello world", style="bold")
    print_error("Something went wrong")
    print_panel("Title", "Content here")
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()


def print_error(message: str) -> None:
    """Print an error message (red X)."""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message (yellow warning sign)."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_panel(title: str, content: str, style: str = "blue") -> None:
    """Print content in a panel/box."""
    console.print(Panel(content, title=title, border_style=style))


def create_table(title: str = "") -> Table:
    """Create a table, titled if a title is given."""
    return Table(title=title) if title else Table()


def print_table(table: Table) -> None:
    console.print(table)


__all__ = [
    "console",
    "print_error",
    "print_warning",
    "print_panel",
    "create_table",
    "print_table",
]
