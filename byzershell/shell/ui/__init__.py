"""UI components for the Byzer shell."""

from .banner import show_banner
from .formatter import ShellFormatter
from .highlighter import KeywordHighlighter, KeywordLexer
from .line_helper import StatementHelper, is_complete
from .progress import FinishSignal, ProgressMonitor, start_monitor
from .prompt import ShellPrompt, create_line_reader

__all__ = [
    "show_banner",
    "ShellFormatter",
    "KeywordHighlighter",
    "KeywordLexer",
    "StatementHelper",
    "is_complete",
    "FinishSignal",
    "ProgressMonitor",
    "start_monitor",
    "ShellPrompt",
    "create_line_reader",
]
