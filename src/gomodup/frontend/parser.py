"""
Go Import Parser

Parses the header of a Go source file (package clause and import
declarations) with a Lark LALR grammar. Tokens are fed to an interactive
parser until one cannot continue the header; the rest of the file is
never lexed.
"""

import logging
from pathlib import Path
from typing import Optional

from lark import Lark, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, VisitError
from lark.lexer import Token

from .syntax import GoFileSyntax
from .transformer import GoImportTransformer
from ..shared.errors import LoadError
from ..shared.source_location import SourceLocation

logger = logging.getLogger(__name__)

END_OF_INPUT = "$END"


class GoImportParser:
    """
    Parser for Go import headers.

    - Takes source text, returns GoFileSyntax
    - Keeps token positions so literals can be rewritten in place
    - Converts Lark errors into LoadError with a source snippet
    """

    def __init__(self):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            start="start",
            parser="lalr",
            lexer="basic",
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def parse(self, source: str, source_file: str = "main.go") -> GoFileSyntax:
        """
        Parse the header of ``source``.

        Raises:
            LoadError: if the header is not valid Go
        """
        try:
            tree = self._parse_header(source)
            return GoImportTransformer(source_file).transform(tree)

        except UnexpectedInput as e:
            logger.debug(f"{source_file}: {e}")
            location = SourceLocation(
                file=source_file,
                line=getattr(e, "line", 0) or 0,
                column=getattr(e, "column", 0) or 0,
            )
            raise LoadError(
                f"cannot parse imports of {source_file}",
                location=location,
                source_code=source,
            ) from e

        except VisitError as e:
            raise LoadError(
                f"invalid import path in {source_file}: {e.orig_exc}",
            ) from e

    def _parse_header(self, source: str) -> Tree:
        """
        Parse the longest prefix of ``source`` that forms a complete header.

        The first token the header cannot take (usually the ``func``, ``var``
        or ``type`` opening the body) ends the header, provided the header
        is complete at that point; otherwise that token is the parse error.
        """
        interactive = self.parser.parse_interactive(source)
        tokens = self.parser.lex(source)
        last: Optional[Token] = None

        while True:
            try:
                token = next(tokens)
            except StopIteration:
                break
            except UnexpectedCharacters:
                if END_OF_INPUT in interactive.accepts():
                    break
                raise

            accepts = interactive.accepts()
            if token.type not in accepts and END_OF_INPUT in accepts:
                break
            interactive.feed_token(token)
            last = token

        return interactive.feed_eof(last)
