"""
Base classes and utilities for visualizers.

This module contains common color codes, icons, and base functionality
shared across visualizer implementations.
"""


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"

    # State type colors
    TASK = "\033[94m"  # Blue
    CHOICE = "\033[95m"  # Magenta
    WAIT = "\033[91m"  # Red
    PARALLEL = "\033[97m"  # White
    MAP = "\033[96m"  # Cyan
    PASS = "\033[92m"  # Green
    SUCCEED = "\033[32m"  # Dark green
    FAIL = "\033[31m"  # Dark red

    # Special colors
    TRANSITION = "\033[33m"  # Orange/Yellow
    DESCRIPTION = "\033[90m"  # Gray
    GRAPH_TITLE = "\033[1;36m"  # Bold Cyan


class Icons:
    """Unicode icons for state types and graph elements."""

    GRAPH = "🔄"
    TASK = "🔧"
    CHOICE = "🔀"
    WAIT = "⏳"
    PARALLEL = "⏩"
    MAP = "🔁"
    PASS = "➡️"
    SUCCEED = "✅"
    FAIL = "❌"
    BRANCH = "🌿"
    CATCH = "🛟"
    END = "⏹️"


class BaseVisualizer:
    """Shared tree drawing helpers for visualizers."""

    def __init__(self, use_colors: bool = True, use_icons: bool = True):
        """
        Args:
            use_colors: Whether to use ANSI colors in output
            use_icons: Whether to use Unicode icons in output
        """
        self.use_colors = use_colors
        self.use_icons = use_icons
        self.branch_chars = {"pipe": "│", "tee": "├──", "last": "└──", "space": " " * 3}

    def _connector(self, is_last: bool) -> str:
        return self.branch_chars["last"] if is_last else self.branch_chars["tee"]

    def _child_prefix(self, prefix: str, is_last: bool) -> str:
        """Prefix for lines nested under an entry drawn with ``prefix``."""
        return prefix + (self.branch_chars["space"] if is_last else self.branch_chars["pipe"] + "  ") + " "

    def _colorize(self, text: str, color: str) -> str:
        if self.use_colors:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _iconize(self, icon: str) -> str:
        if self.use_icons:
            return f"{icon} "
        return ""
