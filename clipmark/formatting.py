"""Rich-based console formatting utilities"""

from rich.console import Console
from rich.text import Text

console = Console()


def print_error(message: str) -> None:
    """Print an error message in bold red."""
    text = Text("✗ ", style="bold red") + Text(message, style="bold")
    console.print(text)


def print_header(title: str, width: int = 60) -> None:
    """Print a decorative header."""
    separator = Text("=" * width, style="bold blue")
    padding = max(0, (width - len(title)) // 2)
    console.print(separator)
    console.print(" " * padding + title, style="bold blue")
    console.print(separator)


def print_info(message: str) -> None:
    """Print an informational message in a subtle style."""
    text = Text("ℹ ", style="bold blue") + Text(message, style="blue")
    console.print(text)


def print_key_table(bindings: dict) -> None:
    """Print the clip mode key bindings, one per line."""
    for action, key in bindings.items():
        console.print(Text(f"  {key:>6}  ", style="bold") + Text(action.replace("_", " ")))
