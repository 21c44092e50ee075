"""Unit tests configuration file."""

import os
import struct

import pytest

from dnaview.core import TypeCatalog, encode_pointer
from dnaview.schema import SchemaBlock, parse_schema

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def mesh_schema() -> SchemaBlock:
    with open(f"{FILE_DIR}/mesh.dna", encoding="utf-8") as f:
        return parse_schema(f.read())


@pytest.fixture
def catalog(mesh_schema) -> TypeCatalog:
    return TypeCatalog(mesh_schema, pointer_size=8)


IDENTITY = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)


def _pack_id(name: str, next_ptr: int = 0, prev_ptr: int = 0, flag: int = 0, us: int = 1) -> bytes:
    return (
        encode_pointer(next_ptr, 8)
        + encode_pointer(prev_ptr, 8)
        + name.encode("latin-1").ljust(66, b"\x00")
        + struct.pack("<hi", flag, us)
    )


def _pack_mesh(
    name: str,
    mvert: int = 0,
    mloop: int = 0,
    totvert: int = 0,
    totloop: int = 0,
    loc: tuple[float, float, float] = (0.0, 0.0, 0.0),
    mat: tuple[float, ...] = IDENTITY,
    weights: int = 0,
) -> bytes:
    return (
        _pack_id(name)
        + encode_pointer(mvert, 8)
        + encode_pointer(mloop, 8)
        + struct.pack("<ii", totvert, totloop)
        + struct.pack("<3f", *loc)
        + struct.pack("<9f", *mat)
        + encode_pointer(0, 8)
        + encode_pointer(weights, 8)
    )


def _pack_verts(*coords: tuple[float, float, float]) -> bytes:
    return b"".join(struct.pack("<6f", *co, 0.0, 0.0, 1.0) for co in coords)


@pytest.fixture
def pack_id():
    return _pack_id


@pytest.fixture
def pack_mesh():
    return _pack_mesh


@pytest.fixture
def pack_verts():
    return _pack_verts
