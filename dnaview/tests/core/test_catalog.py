"""Tests for the type catalog."""

import logging

import pytest

from dnaview.core import TypeCatalog
from dnaview.errors import (
    CyclicLayout,
    InvalidPointerSize,
    SchemaError,
    UnknownPrimitive,
    UnknownStruct,
)
from dnaview.schema import parse_schema


def describe_primitives():
    def reads_declared_sizes(expect, catalog):
        expect(catalog.primitive_size("char")) == 1
        expect(catalog.primitive_size("short")) == 2
        expect(catalog.primitive_size("double")) == 8

    def rejects_unknown_primitive(expect, catalog):
        with pytest.raises(UnknownPrimitive) as e:
            catalog.primitive_size("long double")
        expect(e.value.name) == "long double"

    def rejects_bad_pointer_size(mesh_schema):
        with pytest.raises(InvalidPointerSize):
            TypeCatalog(mesh_schema, pointer_size=2)


def describe_struct_layouts():
    def assigns_sequential_offsets(expect, catalog):
        layout = catalog.resolve_struct("ID")
        offsets = [(f.name, f.byte_offset, f.byte_size) for f in layout.ordered_fields]
        expect(offsets) == [
            ("next", 0, 8),
            ("prev", 8, 8),
            ("name", 16, 66),
            ("flag", 82, 2),
            ("us", 84, 4),
        ]
        expect(layout.total_size) == 88

    def offsets_are_running_sums_for_every_struct(expect, catalog):
        for name in catalog.struct_names():
            layout = catalog.resolve_struct(name)
            running = 0
            for f in layout.ordered_fields:
                expect(f.byte_offset) == running
                running += f.byte_size
            expect(layout.total_size) == running

    def sizes_inline_structs_from_their_layout(expect, catalog):
        mesh = catalog.resolve_struct("Mesh")
        expect(mesh.fields_by_name["id"].byte_size) == 88
        expect(mesh.fields_by_name["mvert"].byte_offset) == 88

    def sizes_pointers_without_resolving_pointee(expect, catalog):
        mesh = catalog.resolve_struct("Mesh")
        mvert = mesh.fields_by_name["mvert"]
        expect(mvert.is_pointer) == True
        expect(mvert.type_name) == "MVert"
        expect(mvert.byte_size) == 8

    def sizes_multi_dimensional_arrays(expect, catalog):
        mat = catalog.resolve_struct("Mesh").fields_by_name["mat"]
        expect(mat.array_length) == 9
        expect(mat.dimensions) == (3, 3)
        expect(mat.byte_size) == 36
        expect(mat.element_size) == 4

    def sizes_function_pointers(expect, catalog):
        draw = catalog.resolve_struct("Mesh").fields_by_name["draw"]
        expect(draw.is_pointer) == True
        expect(draw.byte_size) == 8
        expect(catalog.resolve_struct("Mesh").total_size) == 176

    def uses_pointer_size_of_the_container(expect, mesh_schema):
        catalog = TypeCatalog(mesh_schema, pointer_size=4)
        expect(catalog.resolve_struct("ID").total_size) == 80
        expect(catalog.resolve_struct("ListBase").total_size) == 8

    def caches_resolved_layouts(expect, catalog):
        first = catalog.resolve_struct("Mesh")
        second = catalog.resolve_struct("Mesh")
        expect(first is second) == True
        expect(catalog.resolve_struct("ID") is catalog.resolve_struct("ID")) == True

    def resolves_by_struct_index(expect, catalog):
        expect(catalog.resolve_struct(1)) == catalog.resolve_struct("ID")
        expect(catalog.struct_index("Mesh")) == 4
        expect(catalog.struct_name(2)) == "MVert"

    def rejects_unknown_struct_name(expect, catalog):
        with pytest.raises(UnknownStruct) as e:
            catalog.resolve_struct("Camera")
        expect(e.value.key) == "Camera"

    def rejects_unknown_struct_index(catalog):
        with pytest.raises(UnknownStruct):
            catalog.resolve_struct(99)

    def rejects_unknown_field_type():
        schema = parse_schema("types { int 4 } struct Bad { long x; }")
        with pytest.raises(UnknownPrimitive):
            TypeCatalog(schema, 8).resolve_struct("Bad")

    def rejects_duplicate_field_names():
        schema = parse_schema("types { int 4 } struct Dup { int a; int *a; }")
        with pytest.raises(SchemaError):
            TypeCatalog(schema, 8).resolve_struct("Dup")

    def rejects_duplicate_structs():
        schema = parse_schema("types { int 4 } struct A { int a; } struct A { int b; }")
        with pytest.raises(SchemaError):
            TypeCatalog(schema, 8)

    def warns_on_declared_size_mismatch(expect, caplog):
        schema = parse_schema("types { int 4 Pair 12 } struct Pair { int a; int b; }")
        with caplog.at_level(logging.WARNING, logger="dnaview.catalog"):
            layout = TypeCatalog(schema, 8).resolve_struct("Pair")
        expect(layout.total_size) == 8
        expect("differs from declared size 12" in caplog.text) == True


def describe_cyclic_layouts():
    def detects_inline_self_reference(expect):
        schema = parse_schema(
            """
            types { int 4 }
            struct A { int x; B b; }
            struct B { A a; }
            """
        )
        catalog = TypeCatalog(schema, 8)
        with pytest.raises(CyclicLayout) as e:
            catalog.resolve_struct("A")
        expect(e.value.chain) == ("A", "B", "A")

    def stays_cyclic_on_retry(expect):
        schema = parse_schema("types { int 4 } struct Node { int v; Node inner; }")
        catalog = TypeCatalog(schema, 8)
        with pytest.raises(CyclicLayout):
            catalog.resolve_struct("Node")
        with pytest.raises(CyclicLayout) as e:
            catalog.resolve_struct("Node")
        expect(e.value.chain) == ("Node", "Node")

    def allows_self_reference_through_pointers(expect):
        schema = parse_schema("types { int 4 } struct Link { Link *next; int v; }")
        expect(TypeCatalog(schema, 8).resolve_struct("Link").total_size) == 12
