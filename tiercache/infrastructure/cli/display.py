import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.json import JSON
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tiercache.domain.interfaces.user_interface import UserInterface
from tiercache.domain.models.common import CacheKey, JsonValue

logger = logging.getLogger(__name__)


def format_duration(duration: timedelta) -> str:
    """Renders a duration as e.g. '1h 2m 3s' or '45s'."""
    total = int(duration.total_seconds())
    minutes, seconds = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    @console.setter
    def console(self, value: Console) -> None:
        self._console = value

    def display_output(self, output: JsonValue, **kwargs: Any) -> None:
        """Pretty-prints a cached JSON value.

        Args:
            output: The value to display.
            **kwargs: ``title`` wraps the value in a titled panel.
        """
        title = kwargs.get("title")
        rendered = JSON.from_data(output, indent=2)
        if title:
            self.console.print(Panel(rendered, title=f"[bold cyan]{escape(title)}[/bold cyan]", box=ROUNDED, border_style="cyan"))
        else:
            self.console.print(rendered)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style."""
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.console.print(f"[blue]Info:[/blue] {escape(info_message)}")

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        self.console.print(f"[bold yellow]Warning:[/bold yellow] {escape(warning_message)}")

    def display_entry_details(self, key: CacheKey, expires_at: datetime, remaining: timedelta) -> None:
        """Shows expiry details of a resident entry as a small table."""
        table = Table(show_header=False, box=SIMPLE, border_style="cyan", padding=(0, 1))
        table.add_column("Field", style="bold cyan")
        table.add_column("Value")
        table.add_row("Key", Text(key))
        table.add_row("Expires at", expires_at.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z"))
        table.add_row("Remaining", format_duration(remaining))
        self.console.print(table)
