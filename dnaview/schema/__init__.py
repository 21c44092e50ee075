"""Embedded schema types and parsers."""

from .declarator import Declarator as Declarator
from .declarator import parse_declarator as parse_declarator
from .parser import parse_schema as parse_schema
from .types import FieldSpec as FieldSpec
from .types import RawBlock as RawBlock
from .types import SchemaBlock as SchemaBlock
from .types import StructDef as StructDef
