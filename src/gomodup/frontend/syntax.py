"""
Syntax representation of a Go source file header.

Only what the upgrade needs is modelled: the package name and every import
spec with the exact character span of its quoted path literal. The rest of
the file stays as original text and is never re-printed.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..shared.errors import InvalidInputError
from ..shared.source_location import SourceLocation

INTERPRETED_QUOTE = '"'
RAW_QUOTE = "`"


@dataclass
class ImportReference:
    """
    One import spec inside a Go file.

    ``start``/``end`` delimit the quoted literal (quotes included) in the
    file text. ``new_path`` is set by ``rewrite`` and is what ``literal``
    renders from then on.
    """
    file_path: str
    path: str
    start: int
    end: int
    quote: str = INTERPRETED_QUOTE
    alias: Optional[str] = None
    line: int = 0
    column: int = 0
    new_path: Optional[str] = None

    @property
    def current_path(self) -> str:
        return self.new_path if self.new_path is not None else self.path

    @property
    def changed(self) -> bool:
        return self.new_path is not None and self.new_path != self.path

    @property
    def literal(self) -> str:
        """The quoted literal as it should appear in the file."""
        return f"{self.quote}{self.current_path}{self.quote}"

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.file_path, self.line, self.column, self.start, self.end)

    def rewrite(self, new_path: str) -> None:
        if self.quote == RAW_QUOTE and RAW_QUOTE in new_path:
            raise InvalidInputError(
                f"cannot place {new_path!r} in a raw string literal",
                location=self.location,
            )
        self.new_path = new_path

    def __str__(self) -> str:
        prefix = f"{self.alias} " if self.alias else ""
        return f"{prefix}{self.literal}"


@dataclass
class GoFileSyntax:
    """Parsed header of one Go file."""
    file_path: str
    package: str
    imports: List[ImportReference] = field(default_factory=list)
