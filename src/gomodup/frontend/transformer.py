"""
Go import header transformer.

Converts the Lark parse tree of a Go file header into GoFileSyntax.
"""

import ast
import logging
from typing import List, Optional, Union

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from .syntax import GoFileSyntax, ImportReference, INTERPRETED_QUOTE, RAW_QUOTE

logger: logging.Logger = logging.getLogger(__name__)

ImportChildren: TypeAlias = List[Union[Token, ImportReference]]


def unquote_go_string(literal: str) -> str:
    """
    Value of a Go string literal.

    Raw strings are taken verbatim. Interpreted strings share their escape
    sequences with Python string literals, so Python's literal parser
    decodes them.
    """
    if literal.startswith(RAW_QUOTE):
        return literal[1:-1]
    body = literal[1:-1]
    if "\\" not in body:
        return body
    return ast.literal_eval(literal)


class GoImportTransformer(Transformer):
    """Builds ImportReference entries from import specs, keeping token spans."""

    def __init__(self, file_path: str):
        super().__init__()
        self.file_path = file_path

    def package_clause(self, children: List[Token]) -> str:
        return str(children[-1])

    @v_args(inline=True)
    def import_alias(self, name: Token) -> str:
        return str(name)

    @v_args(inline=True)
    def import_path(self, literal: Token) -> Token:
        return literal

    def import_spec(self, children: ImportChildren) -> ImportReference:
        alias: Optional[str] = children[0] if len(children) == 2 else None
        literal: Token = children[-1]
        quote = RAW_QUOTE if literal.type == "RAW_STRING" else INTERPRETED_QUOTE
        return ImportReference(
            file_path=self.file_path,
            path=unquote_go_string(str(literal)),
            start=literal.start_pos,
            end=literal.end_pos,
            quote=quote,
            alias=alias,
            line=literal.line,
            column=literal.column,
        )

    def single_import(self, children: ImportChildren) -> List[ImportReference]:
        return [c for c in children if isinstance(c, ImportReference)]

    grouped_import = single_import

    def start(self, children: list) -> GoFileSyntax:
        package = children[0]
        imports: List[ImportReference] = []
        for decl in children[1:]:
            if decl:
                imports.extend(decl)
        logger.debug(f"{self.file_path}: package {package}, {len(imports)} imports")
        return GoFileSyntax(file_path=self.file_path, package=package, imports=imports)
