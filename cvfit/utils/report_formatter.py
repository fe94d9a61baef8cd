"""
Utility functions for formatting text-based reports and tables.

Provides consistent table formatting for fitting statistics reports.
"""

from typing import Any, List


class Column:
    """Column definition for table formatting."""

    def __init__(self, name: str, width: int, align: str = "<"):
        """
        Args:
            name: Column header name
            width: Column width in characters
            align: Alignment ('<' left, '>' right, '^' center)
        """
        self.name = name
        self.width = width
        self.align = align

    def format_header(self) -> str:
        return f"{self.name:{self.align}{self.width}}"

    def format_value(self, value: Any) -> str:
        if isinstance(value, float):
            return f"{value:{self.align}{self.width}.1f}"
        return f"{str(value):{self.align}{self.width}}"


class TableFormatter:
    """Builder for formatted text tables with aligned columns."""

    def __init__(self, columns: List[Column], total_width: int = 72):
        """
        Args:
            columns: List of Column definitions
            total_width: Total report width for separators
        """
        self.columns = columns
        self.total_width = total_width
        self.lines: List[str] = []

    def add_section_header(self, title: str) -> "TableFormatter":
        """
        Add section header with top/bottom separator lines.

        Args:
            title: Section title

        Returns:
            Self for method chaining
        """
        self.lines.append("=" * self.total_width)
        self.lines.append(title)
        self.lines.append("=" * self.total_width)
        return self

    def add_column_headers(self) -> "TableFormatter":
        """Add a header row for the configured columns followed by a rule."""
        self.lines.append(" ".join(col.format_header() for col in self.columns))
        self.lines.append("-" * self.total_width)
        return self

    def add_row(self, *values: Any) -> "TableFormatter":
        """
        Add a data row. Values are matched to columns positionally.

        Raises:
            ValueError: If the number of values differs from the number of columns
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")
        self.lines.append(" ".join(col.format_value(v) for col, v in zip(self.columns, values)))
        return self

    def add_line(self, text: str = "") -> "TableFormatter":
        """Add a free-form line (notes, summaries)."""
        self.lines.append(text)
        return self

    def add_separator(self) -> "TableFormatter":
        self.lines.append("-" * self.total_width)
        return self

    def render(self) -> str:
        return "\n".join(self.lines)
