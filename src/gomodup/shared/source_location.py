"""
Source Location (Span)

A position inside a Go source file or a go.mod manifest, used to point
diagnostics at the offending text.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location.

    - File, 1-based line and column
    - Optional character offsets into the file text (start/end)
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
