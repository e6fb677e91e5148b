"""Rich console theme and helpers shared by the CLI and logging."""

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# Minimal palette: errors stand out, hints stay quiet
TESTSCOPE_THEME = Theme(
    {
        "error": "bold red",
        "warning": "yellow",
        "info": "cyan",
        "muted": "dim",
        "path": "bold",
    }
)


def create_console(stderr: bool = False) -> Console:
    """Create a console using the testscope theme."""
    return Console(theme=TESTSCOPE_THEME, stderr=stderr)


def print_error(console: Console, message: str) -> None:
    """Print an error message; the first line is highlighted, the rest muted."""
    first, _, rest = message.partition("\n")
    console.print(f"[error]{escape(first)}[/]", soft_wrap=True)
    if rest:
        console.print(f"[muted]{escape(rest)}[/]", soft_wrap=True)
