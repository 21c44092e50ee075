"""Type definitions for the embedded schema and raw container blocks."""

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin

from ..errors import SchemaError


@dataclass
class FieldSpec(DataClassJsonMixin):
    """One declared field of a struct, exactly as stored in the schema.

    The name is a raw declarator and may carry pointer sigils and array
    suffixes, e.g. ``*next``, ``co[3]`` or ``(*func)()``.
    """

    type: str
    name: str


@dataclass
class StructDef(DataClassJsonMixin):
    """A struct definition: a name and its fields in declaration order."""

    name: str
    fields: list[FieldSpec]


@dataclass
class SchemaBlock(DataClassJsonMixin):
    """The self-describing type table embedded in a container."""

    primitive_names: list[str]
    primitive_sizes: list[int]
    struct_defs: list[StructDef] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.primitive_names) != len(self.primitive_sizes):
            raise SchemaError(
                f"{len(self.primitive_names)} primitive names but "
                f"{len(self.primitive_sizes)} primitive sizes"
            )


@dataclass(frozen=True, slots=True)
class RawBlock:
    """A block as handed over by the container reader."""

    code: str
    declared_struct_index: int
    address: int
    data: bytes
    length: int | None = None

    @property
    def size(self) -> int:
        return len(self.data) if self.length is None else self.length
