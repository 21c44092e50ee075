"""Read-only struct views onto block bytes."""

import struct
from collections.abc import Iterator
from typing import Any

from ..errors import (
    FieldNotFound,
    IndexOutOfRange,
    NotAnInlineStruct,
    TruncatedData,
    UnknownPrimitive,
    UnsupportedPrimitiveWidth,
)
from .catalog import ResolvedField, StructLayout, TypeCatalog

DEFAULT_ENCODING = "latin-1"

# Primitive type name -> (struct format char, canonical width)
PRIMITIVE_FORMATS: dict[str, tuple[str, int]] = {
    "char": ("b", 1),
    "uchar": ("B", 1),
    "int8_t": ("b", 1),
    "uint8_t": ("B", 1),
    "short": ("h", 2),
    "ushort": ("H", 2),
    "int16_t": ("h", 2),
    "uint16_t": ("H", 2),
    "int": ("i", 4),
    "uint": ("I", 4),
    "int32_t": ("i", 4),
    "uint32_t": ("I", 4),
    "float": ("f", 4),
    "double": ("d", 8),
    "int64_t": ("q", 8),
    "uint64_t": ("Q", 8),
}


def decode_pointer(data: bytes, pointer_size: int, offset: int = 0) -> int:
    """Decode a stored pointer value.

    The first 32-bit word holds the low half and, for 8-byte pointers, the
    second word holds the high half. Each word is stored most significant
    byte first.
    """
    low = int.from_bytes(data[offset : offset + 4], byteorder="big")
    if pointer_size != 8:
        return low
    high = int.from_bytes(data[offset + 4 : offset + 8], byteorder="big")
    return (high << 32) | low


def encode_pointer(value: int, pointer_size: int) -> bytes:
    """Encode a pointer value in the layout read by decode_pointer."""
    low = (value & 0xFFFFFFFF).to_bytes(4, byteorder="big")
    if pointer_size != 8:
        return low
    return low + ((value >> 32) & 0xFFFFFFFF).to_bytes(4, byteorder="big")


class StructView:
    """A struct layout bound to a byte region at a base offset.

    Views borrow their bytes and keep no cursor: every read computes its
    absolute position from the layout and the base offset.
    """

    __slots__ = ("layout", "data", "base_offset", "catalog", "encoding")

    def __init__(
        self,
        layout: StructLayout,
        data: bytes,
        base_offset: int,
        catalog: TypeCatalog,
        *,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        self.layout = layout
        self.data = data
        self.base_offset = base_offset
        self.catalog = catalog
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"StructView({self.layout.name} @ {self.base_offset})"

    @property
    def struct_name(self) -> str:
        return self.layout.name

    def fields(self) -> Iterator[ResolvedField]:
        return iter(self.layout.ordered_fields)

    def get_field(self, name: str) -> ResolvedField:
        """Look up a resolved field by its bare name."""
        if name not in self.layout.fields_by_name:
            raise FieldNotFound(name, self.layout.name)
        return self.layout.fields_by_name[name]

    def read_int32(self, name: str, index: int = 0) -> int:
        """Read a little-endian ``int`` from the field."""
        value: int = self._read_primitive(name, index, "int", "<i", 4)
        return value

    def read_int16(self, name: str, index: int = 0) -> int:
        """Read a little-endian ``short`` from the field."""
        value: int = self._read_primitive(name, index, "short", "<h", 2)
        return value

    def read_float32(self, name: str, index: int = 0) -> float:
        """Read a little-endian ``float`` from the field."""
        value: float = self._read_primitive(name, index, "float", "<f", 4)
        return value

    def read_scalar(self, name: str, index: int = 0) -> int | float:
        """Read one element of a primitive field, dispatching on its type."""
        field = self.get_field(name)
        if field.type_name not in PRIMITIVE_FORMATS:
            raise UnknownPrimitive(field.type_name)
        fmt, width = PRIMITIVE_FORMATS[field.type_name]
        return self._read_primitive(name, index, field.type_name, "<" + fmt, width)

    def read_string(self, name: str) -> str:
        """Read a fixed-width character array, stopping at the first null byte."""
        field = self.get_field(name)
        raw = self._slice(self.base_offset + field.byte_offset, field.byte_size)
        return raw.split(b"\x00", 1)[0].decode(self.encoding)

    def read_pointer_raw(self, name: str) -> int:
        """Read the raw address stored in the field."""
        field = self.get_field(name)
        size = self.catalog.pointer_size
        raw = self._slice(self.base_offset + field.byte_offset, size)
        return decode_pointer(raw, size)

    def get_nested(self, name: str, index: int = 0) -> "StructView":
        """View an inline struct field over the same bytes."""
        field = self.get_field(name)
        if field.is_pointer or not self.catalog.has_struct(field.type_name):
            raise NotAnInlineStruct(name, self.layout.name)
        _check_index(field, index)

        layout = self.catalog.resolve_struct(field.type_name)
        return StructView(
            layout,
            self.data,
            self.base_offset + field.byte_offset + index * layout.total_size,
            self.catalog,
            encoding=self.encoding,
        )

    def _read_primitive(
        self, name: str, index: int, type_name: str, fmt: str, width: int
    ) -> Any:
        field = self.get_field(name)
        declared = self.catalog.primitive_size(type_name)
        if declared != width:
            raise UnsupportedPrimitiveWidth(type_name, declared, width)
        _check_index(field, index)

        offset = self.base_offset + field.byte_offset + index * declared
        self._check_bounds(offset, width)
        return struct.unpack_from(fmt, self.data, offset)[0]

    def _slice(self, offset: int, size: int) -> bytes:
        self._check_bounds(offset, size)
        return bytes(self.data[offset : offset + size])

    def _check_bounds(self, offset: int, size: int) -> None:
        if offset < 0 or offset + size > len(self.data):
            raise TruncatedData(offset, size, len(self.data))


def _check_index(field: ResolvedField, index: int) -> None:
    if not 0 <= index < field.array_length:
        raise IndexOutOfRange(field.name, index, field.array_length)
