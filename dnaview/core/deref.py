"""Pointer dereferencing across blocks."""

from ..errors import NotAPointer
from .address import AddressIndex
from .catalog import TypeCatalog
from .view import StructView


class Dereferencer:
    """Follows pointer fields from one view into the block they address."""

    def __init__(self, catalog: TypeCatalog, index: AddressIndex):
        self.catalog = catalog
        self.index = index

    def follow_pointer(
        self, view: StructView, field_name: str, array_index: int = 0
    ) -> StructView:
        """Return a view of the struct the pointer field points at.

        The stored pointer is a virtual address; subtracting the owning
        block's address gives the offset into that block's bytes. A non-zero
        ``array_index`` steps over whole target structs, for pointers to the
        first element of a contiguous array.

        Errors from the address index and the catalog propagate unchanged.
        """
        field = view.get_field(field_name)
        if not field.is_pointer:
            raise NotAPointer(field_name, view.struct_name)

        pointer = view.read_pointer_raw(field_name)
        block = self.index.resolve(pointer)
        layout = self.catalog.resolve_struct(field.type_name)

        return StructView(
            layout,
            block.data,
            (pointer - block.address) + array_index * layout.total_size,
            self.catalog,
            encoding=view.encoding,
        )
