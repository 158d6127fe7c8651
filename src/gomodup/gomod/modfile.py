"""
go.mod statement model

A ModFile is a list of statements. A statement is a single Line
(``require example.com/mod v1.2.3``) or a Block of lines sharing a verb
(``require ( ... )``). Comment and blank lines preceding a statement are
kept in its ``before`` list, so they move with it.
"""

import ast
import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Iterator, List, Optional, Tuple, Union

from ..resolver import versions

logger = logging.getLogger(__name__)

BLANK_LINE = ""
REQUIRE = "require"
INDIRECT_COMMENT = "// indirect"

# Retractions are version ranges in author order; they are never re-sorted
UNSORTED_BLOCKS = frozenset({"retract"})


def unquote_token(token: str) -> str:
    """Value of a possibly quoted go.mod token."""
    if len(token) >= 2 and token[0] == token[-1] == "`":
        return token[1:-1]
    if len(token) >= 2 and token[0] == token[-1] == '"':
        return ast.literal_eval(token)
    return token


def auto_quote(value: str) -> str:
    """Quote a token only when go.mod syntax requires it."""
    if value and not any(ch.isspace() or ch in '"`()' for ch in value) and "//" not in value:
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass
class Line:
    tokens: List[str]
    before: List[str] = field(default_factory=list)
    suffix: Optional[str] = None


@dataclass
class Block:
    tokens: List[str]
    lines: List[Line] = field(default_factory=list)
    before: List[str] = field(default_factory=list)
    suffix: Optional[str] = None
    rparen_before: List[str] = field(default_factory=list)
    rparen_suffix: Optional[str] = None

    @property
    def verb(self) -> str:
        return self.tokens[0] if self.tokens else ""


Statement = Union[Line, Block]


@dataclass(frozen=True)
class Requirement:
    path: str
    version: str
    indirect: bool = False

    def __str__(self) -> str:
        return f"{self.path} {self.version}"


def _compare_tokens(a: Line, b: Line) -> int:
    for x, y in zip(a.tokens, b.tokens):
        if x == y:
            continue
        if versions.is_valid(x) and versions.is_valid(y):
            order = versions.compare(x, y)
            if order:
                return order
        return -1 if x < y else 1
    return (len(a.tokens) > len(b.tokens)) - (len(a.tokens) < len(b.tokens))


def _keep_blanks(comments: List[str]) -> List[str]:
    """Blank separators survive a deleted statement; its comments do not."""
    return [BLANK_LINE] if BLANK_LINE in comments else []


def _join_suffix(*suffixes: Optional[str]) -> Optional[str]:
    present = [s for s in suffixes if s]
    return " ".join(present) if present else None


def _prepend(item: Union[Line, Block], carry: List[str]) -> List[str]:
    """Move carried layout onto ``item``; returns the emptied carry."""
    if carry:
        item.before = carry + item.before
    return []


class ModFile:
    """
    Parsed go.mod file with the mutations needed for a dependency upgrade.

    Call order for an upgrade: drop_requirement, add_requirement, cleanup,
    sort_blocks, format.
    """

    def __init__(self, name: str, statements: List[Statement], trailing: Optional[List[str]] = None):
        self.name = name
        self.statements = statements
        self.trailing = trailing or []

    @classmethod
    def parse(cls, name: str, data: Union[str, bytes]) -> "ModFile":
        from .parser import parse_modfile
        return parse_modfile(name, data)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _require_lines(self) -> Iterator[Tuple[Optional[Block], Line, List[str]]]:
        """Yield (block or None, line, tokens after the verb) for every require line."""
        for stmt in self.statements:
            if isinstance(stmt, Block):
                if stmt.verb == REQUIRE:
                    for line in stmt.lines:
                        yield stmt, line, line.tokens
            elif stmt.tokens and stmt.tokens[0] == REQUIRE:
                yield None, stmt, stmt.tokens[1:]

    @property
    def module_path(self) -> Optional[str]:
        for stmt in self.statements:
            if isinstance(stmt, Line) and len(stmt.tokens) >= 2 and stmt.tokens[0] == "module":
                return unquote_token(stmt.tokens[1])
        return None

    @property
    def requirements(self) -> List[Requirement]:
        found = []
        for _, line, args in self._require_lines():
            if len(args) >= 2:
                indirect = bool(line.suffix) and line.suffix.startswith(INDIRECT_COMMENT)
                found.append(Requirement(unquote_token(args[0]), args[1], indirect))
        return found

    def has_requirement(self, path: str) -> bool:
        return any(req.path == path for req in self.requirements)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def drop_requirement(self, path: str) -> None:
        """Remove every require line for ``path``, in blocks and single lines."""
        kept: List[Statement] = []
        carry: List[str] = []
        for stmt in self.statements:
            if isinstance(stmt, Block):
                if stmt.verb == REQUIRE:
                    self._drop_from_block(stmt, path)
            elif (
                len(stmt.tokens) >= 2
                and stmt.tokens[0] == REQUIRE
                and unquote_token(stmt.tokens[1]) == path
            ):
                logger.debug(f"{self.name}: dropping require {path}")
                carry += _keep_blanks(stmt.before)
                continue
            carry = _prepend(stmt, carry)
            kept.append(stmt)
        self.statements = kept
        self.trailing = carry + self.trailing

    def _drop_from_block(self, block: Block, path: str) -> None:
        kept: List[Line] = []
        carry: List[str] = []
        for line in block.lines:
            if line.tokens and unquote_token(line.tokens[0]) == path:
                logger.debug(f"{self.name}: dropping require {path}")
                carry += _keep_blanks(line.before)
                continue
            carry = _prepend(line, carry)
            kept.append(line)
        block.lines = kept
        block.rparen_before = carry + block.rparen_before

    def add_requirement(self, path: str, version: str) -> None:
        """
        Require ``path`` at ``version``.

        An existing entry is updated in place and duplicates are removed.
        A new entry goes after the last require statement: into its block,
        or, when that statement is a single line, into a new block holding
        both. Without any require statement a new line is appended.
        """
        existing = [line for _, line, args in self._require_lines() if args and unquote_token(args[0]) == path]
        if existing:
            first = existing[0]
            first.tokens[-1] = version
            for duplicate in existing[1:]:
                duplicate.tokens = []
            self._remove_empty_lines()
            return

        quoted = auto_quote(path)
        for index in range(len(self.statements) - 1, -1, -1):
            stmt = self.statements[index]
            if isinstance(stmt, Block) and stmt.verb == REQUIRE:
                stmt.lines.append(Line(tokens=[quoted, version]))
                return
            if isinstance(stmt, Line) and stmt.tokens and stmt.tokens[0] == REQUIRE:
                self.statements[index] = Block(
                    tokens=[REQUIRE],
                    lines=[
                        Line(tokens=stmt.tokens[1:], suffix=stmt.suffix),
                        Line(tokens=[quoted, version]),
                    ],
                    before=stmt.before,
                )
                return

        self.statements.append(Line(tokens=[REQUIRE, quoted, version], before=[BLANK_LINE]))

    def _remove_empty_lines(self) -> None:
        statements = []
        for stmt in self.statements:
            if isinstance(stmt, Block):
                stmt.lines = [line for line in stmt.lines if line.tokens]
            elif not stmt.tokens:
                continue
            statements.append(stmt)
        self.statements = statements

    def cleanup(self) -> None:
        """Drop empty blocks and collapse one-line blocks into single lines."""
        statements: List[Statement] = []
        carry: List[str] = []
        for stmt in self.statements:
            if isinstance(stmt, Block):
                if not stmt.lines:
                    carry += _keep_blanks(stmt.before + stmt.rparen_before)
                    continue
                if len(stmt.lines) == 1 and not stmt.rparen_before:
                    only = stmt.lines[0]
                    stmt = Line(
                        tokens=stmt.tokens + only.tokens,
                        before=stmt.before + only.before,
                        suffix=_join_suffix(only.suffix, stmt.suffix, stmt.rparen_suffix),
                    )
            carry = _prepend(stmt, carry)
            statements.append(stmt)
        self.statements = statements
        self.trailing = carry + self.trailing

    def sort_blocks(self) -> None:
        """Stable-sort the lines of every block, comparing versions semantically."""
        key = cmp_to_key(_compare_tokens)
        for stmt in self.statements:
            if isinstance(stmt, Block) and stmt.verb not in UNSORTED_BLOCKS:
                stmt.lines.sort(key=key)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def format(self) -> bytes:
        """Render canonical go.mod text."""
        out: List[str] = []
        for stmt in self.statements:
            _emit_comments(out, stmt.before, "")
            if isinstance(stmt, Line):
                out.append(_render(stmt.tokens, stmt.suffix))
                continue
            out.append(_render(stmt.tokens + ["("], stmt.suffix))
            for line in stmt.lines:
                _emit_comments(out, line.before, "\t")
                out.append("\t" + _render(line.tokens, line.suffix))
            _emit_comments(out, stmt.rparen_before, "\t")
            out.append(_render([")"], stmt.rparen_suffix))
        _emit_comments(out, self.trailing, "")

        text = "\n".join(_squeeze_blank_lines(out))
        return (text + "\n").encode("utf-8") if text else b""


def _render(tokens: List[str], suffix: Optional[str]) -> str:
    text = " ".join(tokens)
    if suffix:
        text = f"{text} {suffix}" if text else suffix
    return text


def _emit_comments(out: List[str], comments: List[str], indent: str) -> None:
    for comment in comments:
        out.append(indent + comment if comment != BLANK_LINE else BLANK_LINE)


def _squeeze_blank_lines(lines: List[str]) -> List[str]:
    """At most one blank line in a row, none at the start or the end."""
    result: List[str] = []
    for line in lines:
        if line == BLANK_LINE and (not result or result[-1] == BLANK_LINE):
            continue
        result.append(line)
    while result and result[-1] == BLANK_LINE:
        result.pop()
    return result
