import math

import pytest

from qrsolid.errors import InvalidParameter
from qrsolid.geometry import MaterialTag, Solid, bounding_box, build_solids
from qrsolid.grid import ModuleGrid


def _checker(size):
    rows = []
    for y in range(size):
        rows.append("".join("#" if (x + y) % 2 == 0 else "." for x in range(size)))
    return ModuleGrid.from_rows(rows)


def _single_module_grid(size=21):
    rows = ["." * size for _ in range(size)]
    rows[0] = "#" + "." * (size - 1)
    return ModuleGrid.from_rows(rows)


def test_solid_count_is_dark_modules_plus_plate():
    grid = _checker(7)
    solids = build_solids(grid, 80, 5, 2, 5)
    assert len(solids) == grid.dark_count + 1
    assert solids[-1].material is MaterialTag.BASE_PLATE_LIGHT
    assert all(s.material is MaterialTag.MODULE_DARK for s in solids[:-1])


def test_build_is_idempotent():
    grid = _checker(9)
    assert build_solids(grid, 80, 5, 2, 5) == build_solids(grid, 80, 5, 2, 5)


def test_single_module_scenario():
    solids = build_solids(_single_module_grid(), 80, 5, 2, 5)
    assert len(solids) == 2

    module, plate = solids
    scale = 80 / 21
    assert math.isclose(module.center[0], 0 * scale - 40 + scale / 2)
    assert math.isclose(module.center[1], 40 - scale / 2)
    assert math.isclose(module.center[0], -38.095, abs_tol=1e-3)
    assert math.isclose(module.center[1], 38.095, abs_tol=1e-3)
    assert math.isclose(module.extents[0], scale)
    assert math.isclose(module.extents[1], scale)
    assert module.extents[2] == 2
    assert module.bottom == 0
    assert module.top == 2

    assert plate.extents == (90.0, 90.0, 5.0)
    assert plate.center == (0.0, 0.0, -2.5)
    assert plate.top == 0


def test_y_axis_is_flipped():
    grid = ModuleGrid.from_rows([
        "..",
        "#.",
    ])
    module = build_solids(grid, 10, 1, 1, 1)[0]
    # bottom-left cell of the grid lands in the -x/-y quadrant
    assert module.center[:2] == (-2.5, -2.5)


def test_modules_tile_the_footprint():
    grid = ModuleGrid.from_rows(["###", "###", "###"])
    solids = build_solids(grid, 30, 2, 1, 1)
    modules = solids[:-1]
    xs = sorted({round(s.footprint[0], 9) for s in modules} | {round(s.footprint[2], 9) for s in modules})
    assert xs == [-15.0, -5.0, 5.0, 15.0]


@pytest.mark.parametrize("border", [0, -1, float("nan")])
def test_border_must_be_positive(border):
    with pytest.raises(InvalidParameter, match="Value out of range"):
        build_solids(_single_module_grid(), 80, border, 2, 5)


def test_border_of_five_is_accepted():
    assert len(build_solids(_single_module_grid(), 80, 5, 2, 5)) == 2


@pytest.mark.parametrize("kwargs", [
    {"footprint_mm": 0},
    {"footprint_mm": -80},
    {"footprint_mm": float("inf")},
    {"module_thickness_mm": 0},
    {"base_thickness_mm": -5},
])
def test_other_sizes_must_be_positive(kwargs):
    params = dict(footprint_mm=80, border_mm=5, module_thickness_mm=2, base_thickness_mm=5)
    params.update(kwargs)
    with pytest.raises(InvalidParameter):
        build_solids(_single_module_grid(), **params)


def test_solid_rejects_non_positive_extents():
    with pytest.raises(InvalidParameter):
        Solid((0, 0, 0), (1, 0, 1), MaterialTag.MODULE_DARK)
    solid = Solid([0, 0, 0], [1, 2, 3], "ModuleDark")
    assert solid.material is MaterialTag.MODULE_DARK
    assert solid.center == (0.0, 0.0, 0.0)


def test_bounding_box():
    solids = build_solids(_single_module_grid(), 80, 5, 2, 5)
    lo, hi = bounding_box(solids)
    assert lo == (-45.0, -45.0, -5.0)
    assert hi == (45.0, 45.0, 2.0)
    assert bounding_box([]) is None
