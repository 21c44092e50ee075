"""Field declarator parsing using Lark."""

import os
from dataclasses import dataclass
from functools import lru_cache, reduce
from operator import mul
from typing import Any

from lark import Lark, Token
from lark.exceptions import LarkError
from lark.visitors import Transformer

from ..errors import InvalidFieldName

_g_parser: Lark | None = None


@dataclass(frozen=True, slots=True)
class Declarator:
    """A parsed field declarator.

    ``dimensions`` holds every bracket extent in declaration order, so
    ``mat[4][4]`` gives ``(4, 4)``.
    """

    name: str
    pointer_depth: int = 0
    dimensions: tuple[int, ...] = ()
    is_function_pointer: bool = False

    @property
    def is_pointer(self) -> bool:
        return self.pointer_depth > 0

    @property
    def array_length(self) -> int:
        return reduce(mul, self.dimensions, 1)


def _tokens(args: list[Any], token_type: str) -> list[Token]:
    return [a for a in args if isinstance(a, Token) and a.type == token_type]


class DeclaratorTransformer(Transformer):
    """Transform a declarator parse tree into a Declarator."""

    def start(self, args: list[Any]) -> Declarator:
        return args[0]

    def dim(self, args: list[Any]) -> int:
        return int(args[0])

    def plain(self, args: list[Any]) -> Declarator:
        return Declarator(
            name=str(_tokens(args, "NAME")[0]),
            pointer_depth=len(_tokens(args, "STAR")),
            dimensions=tuple(a for a in args if isinstance(a, int)),
        )

    def function_pointer(self, args: list[Any]) -> Declarator:
        return Declarator(
            name=str(_tokens(args, "NAME")[0]),
            pointer_depth=len(_tokens(args, "STAR")),
            is_function_pointer=True,
        )


def _parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/declarator.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar, parser="lalr", transformer=DeclaratorTransformer())

    return _g_parser


@lru_cache(maxsize=None)
def parse_declarator(text: str) -> Declarator:
    """Parse a raw field name such as ``*next`` or ``co[3]``."""
    try:
        return _parser().parse(text)
    except LarkError as e:
        raise InvalidFieldName(text, next(iter(str(e).splitlines()), "")) from e
