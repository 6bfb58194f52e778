"""CLI output formatting utilities.

Commands hand plain JSON-like data to an OutputWriter; the global
``--output`` flag decides whether it is rendered as text, JSON or YAML.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, TextIO

import yaml


class OutputFormat(str, Enum):
    """Output format options."""
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    format: OutputFormat = OutputFormat.TEXT
    verbose: bool = False
    quiet: bool = False
    file: Optional[TextIO] = None

    @property
    def stream(self) -> TextIO:
        """Get the output stream."""
        return self.file or sys.stdout


class OutputWriter:
    """Handles formatted output for CLI commands."""

    def __init__(self, config: Optional[OutputConfig] = None):
        self.config = config or OutputConfig()

    @property
    def is_json(self) -> bool:
        return self.config.format == OutputFormat.JSON

    def print(self, *args, **kwargs) -> None:
        """Print to the configured output stream."""
        if self.config.quiet:
            return
        kwargs.setdefault("file", self.config.stream)
        print(*args, **kwargs)

    def print_data(self, data: Any, headers: Optional[List[str]] = None) -> None:
        """Print data in the configured format.

        Args:
            data: dict, list, dataclass or scalar.
            headers: Optional column order for lists of objects in text mode.
        """
        fmt = self.config.format

        if fmt == OutputFormat.JSON:
            self._print_json(data)
        elif fmt == OutputFormat.YAML:
            self._print_yaml(data)
        else:
            self._print_text(data, headers)

    def print_dict(self, data: Dict[str, Any], *, separator: str = ": ", indent: int = 0) -> None:
        """Print a dictionary as key-value pairs, nested values as JSON."""
        prefix = " " * indent
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                value = json.dumps(value, default=str)
            self.print(f"{prefix}{key}{separator}{value}")

    def print_dry_run(self, message: str) -> None:
        """Print a dry-run message."""
        self.print(f"[dry-run] {message}")

    def _print_json(self, data: Any) -> None:
        normalized = self._normalize(data)
        self.print(json.dumps(normalized, indent=2, default=str))

    def _print_yaml(self, data: Any) -> None:
        normalized = self._normalize(data)
        self.print(yaml.safe_dump(normalized, default_flow_style=False, sort_keys=False), end="")

    def _row_to_strings(self, row: Any, headers: List[str]) -> List[str]:
        if isinstance(row, dict):
            return [self._cell(row.get(h, "")) for h in headers]
        if isinstance(row, (list, tuple)):
            return [self._cell(v) for v in row]
        return [self._cell(row)]

    @staticmethod
    def _cell(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, default=str)
        return str(value)

    def _calculate_column_widths(self, headers: List[str], str_rows: List[List[str]]) -> List[int]:
        widths = [len(h) for h in headers]
        for str_row in str_rows:
            for i, val in enumerate(str_row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(val))
        return widths

    def _print_table(self, rows: List[Dict[str, Any]], headers: Optional[List[str]]) -> None:
        if not headers:
            headers = []
            for row in rows:
                for key in row:
                    if key not in headers:
                        headers.append(key)
        str_rows = [self._row_to_strings(row, headers) for row in rows]
        widths = self._calculate_column_widths(headers, str_rows)

        header_line = "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        self.print(header_line.rstrip())
        self.print("  ".join("-" * w for w in widths))
        for str_row in str_rows:
            padded = [val.ljust(widths[i]) for i, val in enumerate(str_row)]
            self.print("  ".join(padded).rstrip())

    def _print_text(self, data: Any, headers: Optional[List[str]] = None) -> None:
        data = self._normalize(data)
        if isinstance(data, str):
            self.print(data)
        elif isinstance(data, dict):
            self.print_dict(data)
        elif isinstance(data, list):
            if data and all(isinstance(item, dict) for item in data):
                self._print_table(data, headers)
            else:
                for item in data:
                    self.print(self._cell(item))
        elif data is not None:
            self.print(str(data))

    def _normalize(self, data: Any) -> Any:
        """Turn dataclasses, tuples and enums into JSON-friendly values."""
        if is_dataclass(data) and not isinstance(data, type):
            return asdict(data)
        if isinstance(data, dict):
            return {k: self._normalize(v) for k, v in data.items()}
        if isinstance(data, (list, tuple)):
            return [self._normalize(v) for v in data]
        if isinstance(data, Enum):
            return data.value
        return data
