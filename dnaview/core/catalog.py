"""Type catalog: primitive sizes and lazily resolved struct layouts."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum, auto

from ..errors import CyclicLayout, InvalidPointerSize, SchemaError, UnknownPrimitive, UnknownStruct
from ..schema.declarator import parse_declarator
from ..schema.types import SchemaBlock, StructDef

logger = logging.getLogger("dnaview.catalog")

POINTER_SIZES = frozenset([4, 8])


@dataclass(frozen=True)
class ResolvedField:
    """A field with its pointer/array shape decoded and its offset assigned.

    ``byte_size == element_size * array_length``, where ``element_size`` is
    the pointer size for pointer fields.
    """

    name: str
    type_name: str
    is_pointer: bool
    array_length: int
    byte_size: int
    byte_offset: int
    dimensions: tuple[int, ...] = ()
    pointer_depth: int = 0

    @property
    def element_size(self) -> int:
        return self.byte_size // self.array_length if self.array_length else 0

    @property
    def end_offset(self) -> int:
        return self.byte_offset + self.byte_size


@dataclass(frozen=True)
class StructLayout:
    """Fully resolved, offset-annotated layout of one struct type."""

    name: str
    total_size: int
    ordered_fields: tuple[ResolvedField, ...]
    fields_by_name: dict[str, ResolvedField] = field(compare=False, repr=False)

    def __contains__(self, name: object) -> bool:
        return name in self.fields_by_name


class LayoutState(StrEnum):
    """Resolution state of one struct in the catalog."""

    UNRESOLVED = auto()
    RESOLVING = auto()
    RESOLVED = auto()


class TypeCatalog:
    """Primitive table and struct layouts built from an embedded schema.

    Struct layouts are resolved on first request and cached for the lifetime
    of the catalog. Resolving the same struct twice returns the same object.
    """

    def __init__(self, schema: SchemaBlock, pointer_size: int):
        if pointer_size not in POINTER_SIZES:
            raise InvalidPointerSize(pointer_size)

        self.pointer_size = pointer_size
        self._primitives: dict[str, int] = dict(
            zip(schema.primitive_names, schema.primitive_sizes, strict=True)
        )
        self._struct_defs: list[StructDef] = list(schema.struct_defs)
        self._struct_index: dict[str, int] = {}
        for i, struct_def in enumerate(self._struct_defs):
            if struct_def.name in self._struct_index:
                raise SchemaError(f"Struct {struct_def.name} is defined more than once")
            self._struct_index[struct_def.name] = i

        self._state: dict[str, LayoutState] = dict.fromkeys(
            self._struct_index, LayoutState.UNRESOLVED
        )
        self._layouts: dict[str, StructLayout] = {}
        self._resolving: list[str] = []

        logger.debug(
            "Catalog built: %d primitives, %d structs, pointer size %d",
            len(self._primitives),
            len(self._struct_defs),
            pointer_size,
        )

    def primitive_size(self, name: str) -> int:
        """Size in bytes of a type from the primitive table."""
        if name not in self._primitives:
            raise UnknownPrimitive(name)
        return self._primitives[name]

    def has_primitive(self, name: str) -> bool:
        return name in self._primitives

    def has_struct(self, name: str) -> bool:
        return name in self._struct_index

    def struct_names(self) -> list[str]:
        return [s.name for s in self._struct_defs]

    def struct_name(self, index: int) -> str:
        if not 0 <= index < len(self._struct_defs):
            raise UnknownStruct(index)
        return self._struct_defs[index].name

    def struct_index(self, name: str) -> int:
        if name not in self._struct_index:
            raise UnknownStruct(name)
        return self._struct_index[name]

    def resolve_struct(self, key: str | int) -> StructLayout:
        """Return the layout of a struct, by name or by struct index."""
        name = self.struct_name(key) if isinstance(key, int) else key
        if name not in self._state:
            raise UnknownStruct(name)

        state = self._state[name]
        if state == LayoutState.RESOLVED:
            return self._layouts[name]
        if state == LayoutState.RESOLVING:
            raise CyclicLayout(self._resolving[self._resolving.index(name) :] + [name])

        self._state[name] = LayoutState.RESOLVING
        self._resolving.append(name)
        try:
            layout = self._build_layout(self._struct_defs[self._struct_index[name]])
        except Exception:
            self._state[name] = LayoutState.UNRESOLVED
            raise
        finally:
            self._resolving.pop()

        self._layouts[name] = layout
        self._state[name] = LayoutState.RESOLVED
        return layout

    def type_size(self, type_name: str) -> int:
        """Size of an inline (non-pointer) value of the given type."""
        if type_name in self._struct_index:
            return self.resolve_struct(type_name).total_size
        return self.primitive_size(type_name)

    def _build_layout(self, struct_def: StructDef) -> StructLayout:
        fields: list[ResolvedField] = []
        by_name: dict[str, ResolvedField] = {}
        offset = 0

        for spec in struct_def.fields:
            decl = parse_declarator(spec.name)
            element_size = self.pointer_size if decl.is_pointer else self.type_size(spec.type)
            resolved = ResolvedField(
                name=decl.name,
                type_name=spec.type,
                is_pointer=decl.is_pointer,
                array_length=decl.array_length,
                byte_size=element_size * decl.array_length,
                byte_offset=offset,
                dimensions=decl.dimensions,
                pointer_depth=decl.pointer_depth,
            )
            if resolved.name in by_name:
                raise SchemaError(f"Field {resolved.name} declared twice in {struct_def.name}")

            fields.append(resolved)
            by_name[resolved.name] = resolved
            offset += resolved.byte_size

        declared = self._primitives.get(struct_def.name)
        if declared is not None and declared != offset:
            logger.warning(
                "Struct %s computed size %d differs from declared size %d",
                struct_def.name,
                offset,
                declared,
            )

        logger.debug(
            "Resolved struct %s: %d fields, %d bytes", struct_def.name, len(fields), offset
        )
        return StructLayout(
            name=struct_def.name,
            total_size=offset,
            ordered_fields=tuple(fields),
            fields_by_name=by_name,
        )
