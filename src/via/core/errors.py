"""
Error types for Via parsing, tree building and output writing.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ViaError(Exception):
    """Base exception for all Via errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(ViaError):
    """
    Raised when Via source does not match the grammar.

    Examples:
    - Missing delimiter (``title String`` without a colon)
    - Unexpected keyword or character
    - Unterminated block
    """

    pass


class UnsupportedRuleError(ViaError):
    """
    Raised when a parse-tree rule reaches a builder that does not expect it.

    This means the grammar and the tree builders have drifted apart. It is a
    defect in Via itself, never a problem with user input, and callers must
    let it propagate.
    """

    def __init__(self, rule: str, builder: str, context: Optional["ErrorContext"] = None):
        self.rule = rule
        self.builder = builder
        super().__init__(f"Unsupported rule '{rule}' reached builder '{builder}'", context)


class WriterError(ViaError):
    """
    Raised when generated output cannot be persisted.

    Examples:
    - Output directory cannot be created
    - Generated file or IR snapshot cannot be written
    - Previous output cannot be removed
    """

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(f"{message}: {path}")


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source lines surrounding the error
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "article.via:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts up to 2 lines before the error
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def source_snippet(text: str, line: int, radius: int = 2) -> str:
    """
    Extract the lines around ``line`` for use as an error snippet.

    The first returned line is ``max(1, line - radius)``, which is what
    ``ErrorContext`` assumes when numbering the snippet.
    """
    lines = text.split("\n")
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    return "\n".join(lines[start - 1 : end])


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context)
