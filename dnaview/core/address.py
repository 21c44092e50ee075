"""Address index: resolves pointer values to the block that contains them."""

import logging
from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import AmbiguousPointer, PointerNotResolved
from ..schema.types import RawBlock
from .catalog import StructLayout, TypeCatalog

logger = logging.getLogger("dnaview.address")

# Blocks at this address are unaddressed (e.g. the end-of-file marker).
UNADDRESSED = 0


@dataclass(frozen=True, eq=False)
class MemoryBlock:
    """An addressed chunk of raw bytes with its declared struct layout."""

    index: int
    code: str
    address: int
    length: int
    data: bytes
    declared_layout: StructLayout

    @classmethod
    def from_raw(cls, index: int, raw: RawBlock, catalog: TypeCatalog) -> "MemoryBlock":
        return cls(
            index=index,
            code=raw.code,
            address=raw.address,
            length=raw.size,
            data=raw.data,
            declared_layout=catalog.resolve_struct(raw.declared_struct_index),
        )

    @property
    def end(self) -> int:
        return self.address + self.length


@dataclass(frozen=True, slots=True)
class AddressRange:
    """Inclusive address range ``[start, end]`` owned by one block."""

    start: int
    end: int
    block_index: int


class AddressIndex:
    """Maps pointer values back to the blocks whose address ranges hold them.

    Ranges are ``[address, address + length]`` with an inclusive upper bound,
    so a pointer one past the last byte of a block still resolves to it. When
    such a pointer is also the start of an adjacent block, the adjacent block
    wins. Any other overlap is reported as ambiguous, listing every block
    that contains the pointer.
    """

    def __init__(self, blocks: Sequence[MemoryBlock]):
        self._blocks = {block.index: block for block in blocks}
        self._ranges = sorted(
            (
                AddressRange(block.address, block.end, block.index)
                for block in blocks
                if block.address != UNADDRESSED
            ),
            key=lambda r: (r.start, r.end),
        )
        self._starts = [r.start for r in self._ranges]

        # Running maximum of range ends, used to stop scanning early.
        self._max_end: list[int] = []
        for r in self._ranges:
            self._max_end.append(max(r.end, self._max_end[-1]) if self._max_end else r.end)

        logger.debug(
            "Indexed %d of %d blocks by address", len(self._ranges), len(self._blocks)
        )

    def __len__(self) -> int:
        return len(self._ranges)

    def candidates(self, pointer: int) -> list[AddressRange]:
        """All indexed ranges containing the pointer, in address order."""
        found: list[AddressRange] = []
        i = bisect_right(self._starts, pointer) - 1
        while i >= 0 and self._max_end[i] >= pointer:
            if self._ranges[i].end >= pointer:
                found.append(self._ranges[i])
            i -= 1
        found.reverse()
        return found

    def resolve(self, pointer: int) -> MemoryBlock:
        """Return the unique block containing the pointer."""
        found = self.candidates(pointer)
        if not found:
            raise PointerNotResolved(pointer)
        if len(found) == 1:
            return self._blocks[found[0].block_index]

        # One block ends exactly where the next begins.
        if len(found) == 2:
            before, after = found
            if before.end == pointer and after.start == pointer:
                return self._blocks[after.block_index]

        raise AmbiguousPointer(pointer, [r.block_index for r in found])
