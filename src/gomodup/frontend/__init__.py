"""Go source front end: import header grammar, parser and syntax types."""

from .parser import GoImportParser
from .syntax import GoFileSyntax, ImportReference

__all__ = ["GoImportParser", "GoFileSyntax", "ImportReference"]
