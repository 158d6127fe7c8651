"""
Source Tree Types

Pure data structures for a loaded Go source tree: packages, files, and
the import references inside them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ..frontend.syntax import GoFileSyntax, ImportReference


@dataclass
class SourceFile:
    """
    One Go file: its original text plus the parsed import header.

    Identity is the file path. ``render`` splices rewritten import literals
    into the original text, so every byte outside those literals is kept.
    """
    path: Path
    source: str
    syntax: GoFileSyntax

    @property
    def package(self) -> str:
        return self.syntax.package

    @property
    def imports(self) -> List[ImportReference]:
        return self.syntax.imports

    @property
    def changed(self) -> bool:
        return any(imp.changed for imp in self.imports)

    def render(self) -> str:
        parts: List[str] = []
        cursor = 0
        for imp in sorted(self.imports, key=lambda i: i.start):
            if not imp.changed:
                continue
            parts.append(self.source[cursor:imp.start])
            parts.append(imp.literal)
            cursor = imp.end
        parts.append(self.source[cursor:])
        return "".join(parts)

    def __eq__(self, other) -> bool:
        return isinstance(other, SourceFile) and self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"SourceFile(path={str(self.path)!r}, package={self.package!r}, imports={len(self.imports)})"


@dataclass
class GoPackage:
    """All Go files of one directory."""
    name: str
    directory: Path
    files: List[SourceFile] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Package({self.name}, {self.directory}, {len(self.files)} files)"
