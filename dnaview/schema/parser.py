"""Text schema parser using Lark."""

import os
from dataclasses import dataclass
from typing import Any

from lark import Lark
from lark.exceptions import LarkError
from lark.visitors import Transformer

from ..errors import SchemaError
from .types import FieldSpec, SchemaBlock, StructDef

_g_parser: Lark | None = None


@dataclass
class _Primitive:
    name: str
    size: int


@dataclass
class _Types:
    primitives: list[_Primitive]


class TreeTransformer(Transformer):
    """Transform parse tree into schema types."""

    def primitive(self, args: list[Any]) -> _Primitive:
        return _Primitive(name=str(args[0]), size=int(args[1]))

    def types_block(self, args: list[Any]) -> _Types:
        return _Types(primitives=list(args))

    def field(self, args: list[Any]) -> FieldSpec:
        return FieldSpec(type=str(args[0]), name=str(args[1]))

    def struct_def(self, args: list[Any]) -> StructDef:
        return StructDef(name=str(args[0]), fields=list(args[1:]))

    def start(self, args: list[Any]) -> SchemaBlock:
        primitives = [p for t in args if isinstance(t, _Types) for p in t.primitives]
        return SchemaBlock(
            primitive_names=[p.name for p in primitives],
            primitive_sizes=[p.size for p in primitives],
            struct_defs=[s for s in args if isinstance(s, StructDef)],
        )


def parse_schema(text: str) -> SchemaBlock:
    """Parse a schema written in text form.

    Example:
        types {
            char 1
            int 4
        }
        struct ID {
            char name[66];
            ID *next;
        }
    """
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/schema.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar)

    try:
        tree = _g_parser.parse(text)
    except LarkError as e:
        raise SchemaError(f"Could not parse schema: {e}") from e

    return TreeTransformer().transform(tree)
