"""Rich console rendering of Dashboard results and messages.

Lists of objects are shown as tables, everything else as JSON; errors,
info and warnings get their own panels.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from merakidash.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

# Wide Dashboard objects are cut to this many columns in table view.
MAX_TABLE_COLUMNS = 8


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _columns(rows: List[Dict[str, Any]], limit: int) -> List[str]:
    """Collects keys in first-seen order across all rows."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)[:limit]


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None, max_columns: int = MAX_TABLE_COLUMNS):
        self._console = console or Console()
        self.max_columns = max_columns

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_result(self, data: Any, **kwargs: Any) -> None:
        """Renders a decoded API payload.

        Lists of objects become a table, a bare status code (empty response
        body) is reported as such, anything else is printed as JSON.

        Args:
            data: The decoded payload.
            **kwargs: Additional arguments including:
                - title: Table title
                - as_json: Force JSON output even for lists of objects
        """
        title = kwargs.get("title")
        if isinstance(data, int) and not isinstance(data, bool):
            self.console.print(f"[bold green]HTTP {data}[/bold green] (no content)")
            return
        if data is None:
            self.console.print("[dim]No content[/dim]")
            return
        if (
            not kwargs.get("as_json")
            and isinstance(data, list)
            and data
            and all(isinstance(row, dict) for row in data)
        ):
            self.console.print(self._build_table(data, title))
            return
        self.console.print_json(json.dumps(data))

    def _build_table(self, rows: List[Dict[str, Any]], title: Optional[str]) -> Table:
        columns = _columns(rows, self.max_columns)
        table = Table(title=title, box=ROUNDED, show_lines=False, header_style="bold cyan")
        for column in columns:
            table.add_column(column, overflow="fold")
        for row in rows:
            table.add_row(*(_cell(row.get(column)) for column in columns))
        logger.debug(f"Rendered table with {len(rows)} rows and {len(columns)} columns")
        return table

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)
