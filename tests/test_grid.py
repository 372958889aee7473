import numpy as np
import pytest

from qrsolid.errors import EncodingFailed, InvalidParameter
from qrsolid.grid import EccLevel, ModuleGrid, encode


def test_from_rows_and_lookup():
    grid = ModuleGrid.from_rows([
        "#..",
        ".#.",
        "..#",
    ])
    assert grid.size == 3
    assert grid.module(0, 0)
    assert grid.module(1, 1)
    assert not grid.module(1, 0)
    assert grid.dark_count == 3


def test_lookup_outside_grid_is_light():
    grid = ModuleGrid.from_rows(["##", "##"])
    assert not grid.module(-1, 0)
    assert not grid.module(0, 2)
    assert not grid.module(5, 5)


def test_dark_modules_row_major():
    grid = ModuleGrid.from_rows([
        ".#.",
        "#.#",
        "...",
    ])
    assert list(grid.dark_modules()) == [(1, 0), (0, 1), (2, 1)]


def test_grid_is_immutable():
    source = np.zeros((4, 4), dtype=bool)
    grid = ModuleGrid(source)
    source[0, 0] = True
    assert not grid.module(0, 0)
    with pytest.raises(ValueError):
        grid._modules[0, 0] = True


@pytest.mark.parametrize("modules", [
    [],
    [[True, False]],
    np.zeros((2, 3), dtype=bool),
    np.zeros((2, 2, 2), dtype=bool),
])
def test_rejects_non_square(modules):
    with pytest.raises(InvalidParameter):
        ModuleGrid(modules)


def test_rejects_ragged_rows():
    with pytest.raises(InvalidParameter):
        ModuleGrid([[True], [True, False]])


def test_empty_grid():
    grid = ModuleGrid.empty(10)
    assert grid.size == 10
    assert grid.dark_count == 0
    with pytest.raises(InvalidParameter):
        ModuleGrid.empty(0)


def test_equality():
    a = ModuleGrid.from_rows(["#.", ".#"])
    b = ModuleGrid.from_rows(["1 ", " 1"])
    assert a == b
    assert hash(a) == hash(b)
    assert a != ModuleGrid.empty(2)


def test_ecc_parse():
    assert EccLevel.parse("low") is EccLevel.LOW
    assert EccLevel.parse(EccLevel.HIGH) is EccLevel.HIGH
    with pytest.raises(InvalidParameter):
        EccLevel.parse("extreme")


def test_encode_hello_world_is_version_1():
    grid = encode("Hello World", EccLevel.LOW)
    assert grid.size == 21
    # finder pattern corners are always dark
    assert grid.module(0, 0)
    assert grid.module(20, 0)
    assert grid.module(0, 20)


def test_encode_is_deterministic():
    assert encode("WIFI:S:Home") == encode("WIFI:S:Home")


def test_encode_overflow_raises():
    with pytest.raises(EncodingFailed):
        encode("x" * 5000, EccLevel.LOW)
