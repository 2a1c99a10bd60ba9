from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.theme import Theme

# Custom theme for consistent styling
custom_theme = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "bold red",
        "highlight": "magenta",
    }
)

# stdout is reserved for the generated comment
console = Console(theme=custom_theme, stderr=True)


@contextmanager
def spinner(message: str = "Processing...") -> Iterator[None]:
    """Show a spinner on stderr while the wrapped block runs."""
    with console.status(f"[bold green]{message}", spinner="moon"):
        yield
