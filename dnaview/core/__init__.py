"""Core schema-driven views: catalog, struct views, address index, dereferencer."""

from .address import AddressIndex as AddressIndex
from .address import MemoryBlock as MemoryBlock
from .catalog import ResolvedField as ResolvedField
from .catalog import StructLayout as StructLayout
from .catalog import TypeCatalog as TypeCatalog
from .container import Container as Container
from .deref import Dereferencer as Dereferencer
from .view import StructView as StructView
from .view import decode_pointer as decode_pointer
from .view import encode_pointer as encode_pointer
