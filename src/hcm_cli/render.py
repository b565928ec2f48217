"""
Output rendering and formatting for HCM CLI.

Provides rich-based table formatting and JSON output for both human and
machine consumption.
"""

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.json import JSON
from rich.table import Table


class Renderer:
    """Output renderer with support for human and machine formats."""

    def __init__(self, json_output: bool = False, quiet: bool = False):
        """Initialize renderer."""
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console()
        self.error_console = Console(stderr=True)

    def print(self, message: str, **kwargs) -> None:
        """Print message with appropriate formatting."""
        if self.quiet or self.json_output:
            return
        self.console.print(message, **kwargs)

    def print_json(self, data: Any) -> None:
        """Print JSON data."""
        if self.json_output:
            print(json.dumps(data, indent=2, default=str))
        else:
            self.console.print(JSON.from_data(data, default=str))

    def print_table(self, data: List[Dict[str, Any]], title: Optional[str] = None) -> None:
        """Print data as table."""
        if self.json_output:
            print(json.dumps(data, indent=2, default=str))
            return

        if not data:
            self.print("No data to display")
            return

        table = Table(title=title)
        for key in data[0].keys():
            table.add_column(key.replace("_", " ").title())

        for row in data:
            table.add_row(*["" if v is None else str(v) for v in row.values()])

        self.console.print(table)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.error_console.print(f"Error: {message}", style="red", markup=False)

    def print_success(self, message: str) -> None:
        """Print success message."""
        if self.quiet or self.json_output:
            return
        self.console.print(message, style="green")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.error_console.print(f"Warning: {message}", style="yellow", markup=False)
