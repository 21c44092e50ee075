"""Errors raised while interpreting a self-describing container.

Every error is terminal for the call that raised it. Nothing in the library
catches these to substitute a default value.
"""

from collections.abc import Sequence


class DnaError(RuntimeError):
    """Base class for all dnaview errors."""


class SchemaError(DnaError):
    """Raised when the schema itself is structurally unusable."""


class InvalidFieldName(SchemaError):
    """Raised when a field declarator cannot be parsed."""

    def __init__(self, declarator: str, reason: str = "") -> None:
        self.declarator = declarator
        message = f"Invalid field declarator {declarator!r}"
        super().__init__(f"{message}: {reason}" if reason else message)


class InvalidPointerSize(DnaError):
    """Raised when the container declares a pointer size other than 4 or 8."""

    def __init__(self, pointer_size: int) -> None:
        self.pointer_size = pointer_size
        super().__init__(f"Pointer size must be 4 or 8, got {pointer_size}")


class UnknownPrimitive(DnaError):
    """Raised when a type name is absent from the primitive table."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown primitive type: {name}")


class UnknownStruct(DnaError):
    """Raised when a struct name or index is absent from the struct table."""

    def __init__(self, key: str | int) -> None:
        self.key = key
        super().__init__(f"Unknown struct: {key!r}")


class CyclicLayout(DnaError):
    """Raised when a struct contains itself through inline fields."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__("Cyclic struct layout: " + " -> ".join(self.chain))


class FieldNotFound(DnaError):
    """Raised when a struct has no field with the requested name."""

    def __init__(self, name: str, struct_name: str) -> None:
        self.name = name
        self.struct_name = struct_name
        super().__init__(f"Could not find field {name} on type {struct_name}")


class UnsupportedPrimitiveWidth(DnaError):
    """Raised when the schema declares a non-canonical width for a primitive."""

    def __init__(self, type_name: str, declared: int, expected: int) -> None:
        self.type_name = type_name
        self.declared = declared
        self.expected = expected
        super().__init__(
            f"Primitive {type_name} is declared with {declared} bytes, only {expected} is supported"
        )


class IndexOutOfRange(DnaError):
    """Raised when an array index is outside the declared array length."""

    def __init__(self, name: str, index: int, length: int) -> None:
        self.name = name
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range for {name}[{length}]")


class NotAnInlineStruct(DnaError):
    """Raised when nested access is attempted through a pointer or primitive field."""

    def __init__(self, name: str, struct_name: str) -> None:
        self.name = name
        self.struct_name = struct_name
        super().__init__(f"Field {name} on type {struct_name} is not an inline struct")


class NotAPointer(DnaError):
    """Raised when a non-pointer field is dereferenced."""

    def __init__(self, name: str, struct_name: str) -> None:
        self.name = name
        self.struct_name = struct_name
        super().__init__(f"Field {name} on type {struct_name} is not a pointer")


class TruncatedData(DnaError):
    """Raised when a read extends past the end of a block's bytes."""

    def __init__(self, offset: int, size: int, available: int) -> None:
        self.offset = offset
        self.size = size
        self.available = available
        super().__init__(
            f"Read of {size} bytes at offset {offset} exceeds {available} available bytes"
        )


class PointerNotResolved(DnaError):
    """Raised when a pointer falls inside no indexed block."""

    def __init__(self, pointer: int) -> None:
        self.pointer = pointer
        super().__init__(f"Pointer 0x{pointer:x} does not resolve to any block")


class AmbiguousPointer(DnaError):
    """Raised when a pointer falls inside more than one indexed block."""

    def __init__(self, pointer: int, candidates: Sequence[int]) -> None:
        self.pointer = pointer
        self.candidates = tuple(candidates)
        super().__init__(
            f"Pointer 0x{pointer:x} matches several blocks: {list(self.candidates)}"
        )


class BlockNotFound(DnaError):
    """Raised when no block carries the requested code."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"No block with code {code!r}")
