"""Rich Console factory and theme for gigledger output.

Consoles render to a StringIO buffer, preserving the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GIG_THEME = Theme(
    {
        "gig.ok": "bold green",
        "gig.error": "bold red",
        "gig.warning": "bold yellow",
        "gig.op": "bold cyan",
        "gig.key": "dim",
        "gig.id": "bold blue",
        "gig.amount": "magenta",
        "gig.status.new": "cyan",
        "gig.status.in_progress": "green",
        "gig.status.terminated": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=GIG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    return f"gig.status.{status}" if status in ("new", "in_progress", "terminated") else ""
