"""
Output formatting utilities for the Byzer shell.

Provides consistent formatting for shell output on the shared channel.
"""

from typing import Any, List, Optional

try:
    from rich.console import Console
    from rich.table import Table
    from rich.panel import Panel
    from rich.text import Text
    from rich import box
    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False

from ..utils.shared_io import SharedIO


class ShellFormatter:
    """Formatter for shell output."""

    def __init__(self, io: Optional[SharedIO] = None, use_rich: bool = True):
        """
        Initialize formatter.

        Args:
            io: Channel output is written to
            use_rich: Whether to use rich formatting
        """
        self.io = io or SharedIO()
        self.use_rich = use_rich and RICH_AVAILABLE
        if self.use_rich:
            self.console = Console(file=self.io, highlight=False)

    def print(self, message: str = ""):
        """Print a plain line."""
        if self.use_rich:
            self.console.print(message, markup=False)
        else:
            self.io.write(f"{message}\n")

    def print_success(self, message: str):
        """Print a success message."""
        if self.use_rich:
            self.console.print(f"✅ {message}", style="green", markup=False)
        else:
            self.io.write(f"✅ {message}\n")

    def print_error(self, message: str):
        """Print an error message."""
        if self.use_rich:
            self.console.print(f"❌ {message}", style="red bold", markup=False)
        else:
            self.io.write(f"❌ {message}\n")

    def print_warning(self, message: str):
        """Print a warning message."""
        if self.use_rich:
            self.console.print(f"⚠️  {message}", style="yellow", markup=False)
        else:
            self.io.write(f"⚠️  {message}\n")

    def print_info(self, message: str):
        """Print an info message."""
        if self.use_rich:
            self.console.print(f"💡 {message}", style="blue", markup=False)
        else:
            self.io.write(f"💡 {message}\n")

    def print_header(self, title: str, subtitle: Optional[str] = None):
        """Print a section header."""
        if self.use_rich:
            text = Text(title, style="bold cyan")
            if subtitle:
                text.append(f"\n{subtitle}", style="dim")
            self.console.print(Panel(text, border_style="cyan"))
        else:
            self.io.write("\n" + "=" * 70 + "\n")
            self.io.write(f"{title}\n")
            if subtitle:
                self.io.write(f"{subtitle}\n")
            self.io.write("=" * 70 + "\n")

    def print_table(
        self,
        headers: List[str],
        rows: List[List[Any]],
        title: Optional[str] = None,
        show_header: bool = True,
        show_lines: bool = False,
    ):
        """
        Print a formatted table.

        Args:
            headers: Column headers
            rows: Table rows
            title: Optional table title
            show_header: Whether to show the header row
            show_lines: Whether to show row lines
        """
        if self.use_rich:
            table = Table(
                title=title,
                show_header=show_header,
                header_style="bold cyan",
                border_style="blue",
                show_lines=show_lines,
                box=box.ROUNDED,
            )

            for header in headers:
                table.add_column(Text(str(header)))

            for row in rows:
                table.add_row(*[Text(str(cell)) for cell in row])

            self.console.print(table)
        else:
            # Fallback to plain text table
            if title:
                self.io.write(f"\n{title}\n")
            self.io.write("=" * 70 + "\n")

            if show_header:
                header_line = " | ".join(str(h).ljust(15) for h in headers)
                self.io.write(header_line + "\n")
                self.io.write("-" * 70 + "\n")

            for row in rows:
                row_line = " | ".join(str(cell).ljust(15) for cell in row)
                self.io.write(row_line + "\n")

            self.io.write("=" * 70 + "\n")

    def print_panel(self, content: str, title: Optional[str] = None, style: str = "blue"):
        """
        Print content in a panel.

        Args:
            content: Content to display
            title: Optional panel title
            style: Border style
        """
        if self.use_rich:
            panel = Panel(Text(content), title=title, border_style=style)
            self.console.print(panel)
        else:
            self.io.write("\n" + "=" * 70 + "\n")
            if title:
                self.io.write(f"{title}\n")
                self.io.write("-" * 70 + "\n")
            self.io.write(f"{content}\n")
            self.io.write("=" * 70 + "\n")
