"""
go.mod Parser

Parses go.mod text with a Lark LALR grammar into the ModFile statement
model. Comment and blank lines are attached to the statement that follows
them.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput
from lark.lexer import Token

from .modfile import Block, Line, ModFile, BLANK_LINE
from ..shared.errors import LoadError
from ..shared.source_location import SourceLocation

logger = logging.getLogger(__name__)

class _Comment:
    __slots__ = ("text",)

    def __init__(self, text: str):
        self.text = text

class _Blank:
    __slots__ = ()

_Item = Union[Line, Block, _Comment, _Blank]

def _attach_comments(items: List[_Item]):
    """Fold comment/blank markers into the ``before`` list of the next statement."""
    statements: List[Union[Line, Block]] = []
    pending: List[str] = []
    for item in items:
        if isinstance(item, _Comment):
            pending.append(item.text)
        elif isinstance(item, _Blank):
            pending.append(BLANK_LINE)
        else:
            item.before = pending + item.before
            pending = []
            statements.append(item)
    return statements, pending

class ModFileTransformer(Transformer):
    """Builds Line and Block statements from the go.mod parse tree."""

    @v_args(inline=True)
    def token(self, tok: Token) -> str:
        return str(tok)

    @v_args(inline=True)
    def comment(self, tok: Token) -> _Comment:
        return _Comment(str(tok).rstrip())

    def blank(self, children) -> _Blank:
        return _Blank()

    def line(self, children) -> Line:
        words = [c for c in children if not isinstance(c, Token)]
        suffix = next((str(c).rstrip() for c in children if isinstance(c, Token)), None)
        return Line(tokens=words, suffix=suffix)

    entry = line

    def block(self, children) -> Block:
        index = 0
        verbs: List[str] = []
        while index < len(children) and not isinstance(children[index], (Token, Line, _Comment, _Blank)):
            verbs.append(children[index])
            index += 1

        suffix: Optional[str] = None
        if index < len(children) and isinstance(children[index], Token):
            suffix = str(children[index]).rstrip()
            index += 1

        rparen_suffix: Optional[str] = None
        rest = children[index:]
        if rest and isinstance(rest[-1], Token):
            rparen_suffix = str(rest[-1]).rstrip()
            rest = rest[:-1]

        lines, rparen_before = _attach_comments(rest)
        return Block(
            tokens=verbs,
            lines=lines,
            suffix=suffix,
            rparen_before=rparen_before,
            rparen_suffix=rparen_suffix,
        )

    def start(self, children):
        return _attach_comments(children)

class ModFileParser:
    """Lark parser for go.mod, built once and reused."""

    def __init__(self):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            start="start",
            parser="lalr",
            maybe_placeholders=False,
        )

    def parse(self, name: str, data: Union[str, bytes]) -> ModFile:
        """
        Parse go.mod contents.

        Raises:
            LoadError: with a source snippet when the text is not valid go.mod syntax
        """
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        if text and not text.endswith("\n"):
            text += "\n"
        try:
            tree = self.parser.parse(text)
        except UnexpectedInput as e:
            location = SourceLocation(
                file=name,
                line=getattr(e, "line", 0) or 0,
                column=getattr(e, "column", 0) or 0,
            )
            raise LoadError(f"error parsing module file {name}", location=location, source_code=text) from e

        statements, trailing = ModFileTransformer().transform(tree)
        logger.debug(f"parsed {name}: {len(statements)} statements")
        return ModFile(name=name, statements=statements, trailing=trailing)


_default_parser: Optional[ModFileParser] = None


def parse_modfile(name: str, data: Union[str, bytes]) -> ModFile:
    """Parse go.mod contents with a shared parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = ModFileParser()
    return _default_parser.parse(name, data)
