"""Output rendering and formatting utilities.

This module provides the output formatter the CLI uses to display data as
tables, JSON or YAML.
"""

import sys
import json
import os
from typing import Any, Dict, List, Optional, Union

import yaml
from rich.console import Console
from rich.table import Table
from rich import box

from .config import ENV_OUTPUT_FORMAT
from .exceptions import ValidationError

FORMATS = ("table", "json", "yaml")


class OutputFormatter:
    """Renders data in the format the user asked for."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize output formatter.

        Args:
            console: Rich console instance. If None, creates a new one.
        """
        self.console = console or Console()

    def determine_format(self, format_override: Optional[str] = None) -> str:
        """Determine the output format to use.

        Resolution order: explicit option, ``BLOGSKIN_OUTPUT_FORMAT``, then
        table for an interactive terminal and JSON otherwise.
        """
        if format_override:
            return format_override.lower()

        env_format = os.environ.get(ENV_OUTPUT_FORMAT)
        if env_format:
            return env_format.lower()

        if sys.stdout.isatty():
            return "table"
        return "json"

    def render(self, data: Any, format: Optional[str] = None, **kwargs: Any) -> None:
        """Render data in the specified format.

        Raises:
            ValidationError: If the format is unknown
        """
        format_name = self.determine_format(format)

        if format_name == "table":
            self.render_table(data, **kwargs)
        elif format_name == "json":
            self.render_json(data)
        elif format_name == "yaml":
            self.render_yaml(data)
        else:
            raise ValidationError(
                f"Unknown output format: {format_name}",
                details={"supported": list(FORMATS)},
            )

    def render_table(
        self,
        data: Union[List[Dict[str, Any]], Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
        show_lines: bool = False,
        **kwargs: Any,
    ) -> None:
        """Render data as a table using Rich.

        A flat mapping is shown as two columns of keys and values; a list of
        records gets one column per field.
        """
        if not data:
            self.console.print("[dim]No data to display[/dim]")
            return

        if isinstance(data, dict):
            if all(not isinstance(v, (dict, list)) for v in data.values()):
                self._render_key_values(data, title)
                return
            data = [data]

        if not columns:
            seen: List[str] = []
            for item in data:
                seen.extend(key for key in item if key not in seen)
            columns = seen

        table = Table(title=title, show_lines=show_lines, box=box.ROUNDED)
        for col in columns:
            table.add_column(col.replace("_", " ").title(), overflow="fold")

        for item in data:
            table.add_row(*(self._format_cell(item.get(col)) for col in columns))

        self.console.print(table)

    def _render_key_values(self, data: Dict[str, Any], title: Optional[str]) -> None:
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value", overflow="fold")
        for key, value in data.items():
            table.add_row(str(key), self._format_cell(value))
        self.console.print(table)

    def _format_cell(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "✓" if value else "✗"
        if isinstance(value, (list, dict)):
            return json.dumps(value, ensure_ascii=False, default=str)
        return str(value)

    def render_json(self, data: Any) -> None:
        """Render data as pretty-printed JSON."""
        try:
            print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Failed to serialize data to JSON: {e}")

    def render_yaml(self, data: Any) -> None:
        """Render data as YAML."""
        try:
            print(yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False), end="")
        except yaml.YAMLError as e:
            raise ValidationError(f"Failed to serialize data to YAML: {e}")
