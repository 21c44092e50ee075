"""One opened container: catalog, blocks, address index and dereferencer."""

import logging
from collections.abc import Iterable, Iterator

from ..errors import BlockNotFound, IndexOutOfRange
from ..schema.types import RawBlock, SchemaBlock
from .address import AddressIndex, MemoryBlock
from .catalog import TypeCatalog
from .deref import Dereferencer
from .view import DEFAULT_ENCODING, StructView

logger = logging.getLogger("dnaview.container")

CODE_LENGTH = 4


def normalize_code(code: str) -> str:
    """Pad short block codes such as ``ME`` to their stored 4-character form."""
    if len(code) in (2, 3):
        return code.ljust(CODE_LENGTH, "\x00")
    return code


class Container:
    """Everything built once per opened container, shared by all views."""

    def __init__(
        self,
        schema: SchemaBlock,
        raw_blocks: Iterable[RawBlock],
        pointer_size: int,
        *,
        encoding: str = DEFAULT_ENCODING,
    ):
        self.catalog = TypeCatalog(schema, pointer_size)
        self.blocks = [
            MemoryBlock.from_raw(i, raw, self.catalog) for i, raw in enumerate(raw_blocks)
        ]
        self.index = AddressIndex(self.blocks)
        self.dereferencer = Dereferencer(self.catalog, self.index)
        self.encoding = encoding

        logger.debug("Opened container with %d blocks", len(self.blocks))

    def blocks_with_code(self, code: str) -> list[MemoryBlock]:
        code = normalize_code(code)
        return [block for block in self.blocks if block.code == code]

    def find_block(self, code: str) -> MemoryBlock:
        """First block carrying the given code."""
        for block in self.blocks_with_code(code):
            return block
        raise BlockNotFound(normalize_code(code))

    def view(self, block: MemoryBlock | str, index: int = 0) -> StructView:
        """View the ``index``-th struct instance stored in a block."""
        if isinstance(block, str):
            block = self.find_block(block)

        layout = block.declared_layout
        count = self.element_count(block)
        if not 0 <= index < count:
            raise IndexOutOfRange(block.code, index, count)

        return StructView(
            layout, block.data, index * layout.total_size, self.catalog, encoding=self.encoding
        )

    def views(self, block: MemoryBlock | str) -> Iterator[StructView]:
        """All struct instances stored back to back in a block."""
        if isinstance(block, str):
            block = self.find_block(block)
        for i in range(self.element_count(block)):
            yield self.view(block, i)

    def element_count(self, block: MemoryBlock) -> int:
        size = block.declared_layout.total_size
        return len(block.data) // size if size else 0

    def follow(self, view: StructView, field_name: str, array_index: int = 0) -> StructView:
        return self.dereferencer.follow_pointer(view, field_name, array_index)
